"""full sync / delta sync 오케스트레이션."""

from .dispatcher import EventStreamDispatcher
from .engine import SyncEngine

__all__ = [
    "SyncEngine",
    "EventStreamDispatcher",
]
