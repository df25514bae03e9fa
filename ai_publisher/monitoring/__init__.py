"""
Pipeline monitoring: lifecycle events, listeners and aggregated metrics.
"""

from .events import EventType, PipelineEvent
from .metrics import PipelineMetrics
from .service import (
    LoggingEventListener,
    PipelineEventListener,
    PipelineMonitoringService,
)

__all__ = [
    "EventType",
    "PipelineEvent",
    "PipelineMetrics",
    "PipelineEventListener",
    "LoggingEventListener",
    "PipelineMonitoringService",
]
