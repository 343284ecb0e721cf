# ==============================================================================
# batch_scheduler.py — Windowed batch execution
# ==============================================================================
# Purpose: Run async work over many items with bounded concurrency and a
#          fixed pause between windows
# Sections: Imports, Public exports, Main Classes, Helper Functions
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence

# Sitemap Analyzer ----
from sitemap_analyzer.utils.observer import PipelineObserver, NullObserver

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["BatchScheduler", "create_batch_scheduler_from_config", "is_failure"]

# ==============================================================================
# Main Classes
# ==============================================================================

class BatchScheduler:
    """
    Runs a handler over items in fixed-size windows.

    All items of a window run concurrently, windows run one after another and
    a fixed delay separates consecutive windows. A failing item is turned into
    a failure dict in its own slot; the rest of the window is unaffected.
    """

    def __init__(
        self,
        batch_size: int = 10,
        delay_ms: int = 500,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        observer: Optional[PipelineObserver] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.batch_size = batch_size
        self.delay_ms = delay_ms
        self._sleep = sleep
        self.observer = observer or NullObserver()

    async def run(self, items: Sequence[Any], handler: Callable[[Any], Awaitable[Any]]) -> List[Any]:
        """
        Process items window by window.

        Args:
            items: Items to process
            handler: Async function applied to each item

        Returns:
            One result per item, in input order. Failed items hold
            ``{"error": ..., "original_item": item, "status": "failed"}``.
        """
        items = list(items)
        results: List[Any] = [None] * len(items)
        total_batches = (len(items) + self.batch_size - 1) // self.batch_size

        for batch_number, start in enumerate(range(0, len(items), self.batch_size), start=1):
            batch = items[start:start + self.batch_size]
            self.observer.emit("batch.started", batch=batch_number, of=total_batches, size=len(batch))

            outcomes = await asyncio.gather(*(handler(item) for item in batch), return_exceptions=True)

            for offset, outcome in enumerate(outcomes):
                idx = start + offset
                if isinstance(outcome, Exception):
                    self.observer.emit("batch.item_failed", index=idx, error=str(outcome))
                    results[idx] = {"error": str(outcome), "original_item": items[idx], "status": "failed"}
                else:
                    results[idx] = outcome

            if batch_number < total_batches and self.delay_ms > 0:
                await self._sleep(self.delay_ms / 1000)

        return results

# ==============================================================================
# Helper Functions
# ==============================================================================

def is_failure(result: Any) -> bool:
    """True when a scheduler slot holds a failure dict."""
    return isinstance(result, dict) and result.get("status") == "failed" and "error" in result

def create_batch_scheduler_from_config(config_service, observer: Optional[PipelineObserver] = None) -> BatchScheduler:
    """
    Create a batch scheduler instance from configuration.

    Args:
        config_service: Configuration service instance
        observer: Event sink shared with the rest of the pipeline

    Returns:
        Configured BatchScheduler instance
    """
    return BatchScheduler(
        batch_size=config_service.batch_size,
        delay_ms=config_service.batch_delay_ms,
        observer=observer,
    )
