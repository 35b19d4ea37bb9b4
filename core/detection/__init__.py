from .base import EventSink, NullSink
from .interrupt import NO_END, DetectorState, InterruptDetector

__all__ = [
    "EventSink",
    "NullSink",
    "DetectorState",
    "InterruptDetector",
    "NO_END",
]
