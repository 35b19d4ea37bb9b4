"""
Shared data structures used by the detection core, its sinks and the
stream sources.
"""

from .event_buffer import InterruptRingBuffer
from .models import (
    AMPLITUDE_MAX_VALUE,
    AMPLITUDE_MIN_VALUE,
    TIME_MIN_VALUE,
    Interrupt,
    NormalizedSample,
    Sample,
    SampleBatch,
)
from .sample_window import SampleWindow

__all__ = [
    "AMPLITUDE_MAX_VALUE",
    "AMPLITUDE_MIN_VALUE",
    "TIME_MIN_VALUE",
    "Interrupt",
    "InterruptRingBuffer",
    "NormalizedSample",
    "Sample",
    "SampleBatch",
    "SampleWindow",
]
