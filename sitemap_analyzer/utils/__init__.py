# ==============================================================================
# utils/__init__.py — Utils Package
# ==============================================================================
# Purpose: Scheduling, classification, selector and URL helpers
# ==============================================================================

from .observer import PipelineObserver, LoggingObserver, RecordingObserver, NullObserver
from .batch_scheduler import BatchScheduler, create_batch_scheduler_from_config
from .url_classifier import classify, categorize_urls

__all__ = [
    'PipelineObserver',
    'LoggingObserver',
    'RecordingObserver',
    'NullObserver',
    'BatchScheduler',
    'create_batch_scheduler_from_config',
    'classify',
    'categorize_urls',
]
