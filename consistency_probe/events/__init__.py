"""
Event package for the consistency probe.

Provides the synchronous in-process broker that links the write worker to
the read worker, plus auxiliary listeners (progress logging, event capture).
"""

from consistency_probe.events.broker import (
    NO_IDENTIFIER,
    WRITE_COMPLETED,
    WRITE_FINISHED,
    EventBroker,
)
from consistency_probe.events.listeners import EventRecorder, ProgressListener

__all__ = [
    "NO_IDENTIFIER",
    "WRITE_COMPLETED",
    "WRITE_FINISHED",
    "EventBroker",
    "EventRecorder",
    "ProgressListener",
]
