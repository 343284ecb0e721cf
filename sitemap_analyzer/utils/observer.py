# ==============================================================================
# observer.py — Pipeline event sink
# ==============================================================================
# Purpose: Collaborator that pipeline components report progress events to
# Sections: Imports, Public exports, Main Classes
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
import logging
from typing import Any, Dict, List, Tuple

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["PipelineObserver", "LoggingObserver", "RecordingObserver", "NullObserver"]

# ==============================================================================
# Main Classes
# ==============================================================================

class PipelineObserver:
    """
    Receives named events from the pipeline.

    Components never keep counters or print on their own; they call ``emit``
    and leave it to the observer to log, collect or drop the event.
    """

    def emit(self, event: str, **fields: Any) -> None:
        raise NotImplementedError

class NullObserver(PipelineObserver):
    """Drops every event."""

    def emit(self, event: str, **fields: Any) -> None:
        return None

class LoggingObserver(PipelineObserver):
    """Writes events to the ``sitemap_analyzer`` logger."""

    # Events that point at something the operator should look at
    WARNING_EVENTS = {
        "sitemap.failed",
        "extract.failed",
        "batch.item_failed",
        "fetch.rate_limited",
        "coverage.crawl_failed",
    }

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger("sitemap_analyzer")

    def emit(self, event: str, **fields: Any) -> None:
        level = logging.WARNING if event in self.WARNING_EVENTS else logging.DEBUG
        if event.startswith("pipeline."):
            level = logging.INFO

        details = " ".join(f"{key}={value}" for key, value in fields.items())
        self.logger.log(level, "🔍 %s %s", event, details)

class RecordingObserver(PipelineObserver):
    """Keeps events in memory, mostly for tests."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def emit(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def of(self, event: str) -> List[Dict[str, Any]]:
        """All field payloads recorded for one event name."""
        return [fields for name, fields in self.events if name == event]
