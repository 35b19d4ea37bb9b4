"""Ready-made EventSink implementations."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from shared.event_buffer import InterruptRingBuffer
from shared.models import Interrupt, Sample

from .detection.base import EventSink, NullSink

logger = logging.getLogger(__name__)


class RecordingSink(NullSink):
    """Keeps everything it is told about. Memory grows with the stream."""

    def __init__(self, *, keep_samples: bool = True) -> None:
        self.keep_samples = keep_samples
        self.raw_samples: List[Sample] = []
        self.normalized_samples: List[Sample] = []
        self.interrupts: List[Interrupt] = []
        self.batches = 0

    def on_raw_sample(self, sample: Sample) -> None:
        if self.keep_samples:
            self.raw_samples.append(sample)

    def on_normalized_sample(self, sample: Sample) -> None:
        if self.keep_samples:
            self.normalized_samples.append(sample)

    def on_interrupt(self, interrupt: Interrupt) -> None:
        self.interrupts.append(interrupt)

    def on_batch_complete(self) -> None:
        self.batches += 1


class LoggingSink(NullSink):
    """Logs confirmed interrupts, plus a per-batch summary at DEBUG."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger
        self._raw = 0
        self._normalized = 0
        self._interrupts = 0

    def on_raw_sample(self, sample: Sample) -> None:
        self._raw += 1

    def on_normalized_sample(self, sample: Sample) -> None:
        self._normalized += 1

    def on_interrupt(self, interrupt: Interrupt) -> None:
        self._interrupts += 1
        self._log.info(
            "Interrupt %d-%d (%d ticks)", interrupt.start_time, interrupt.end_time, interrupt.duration
        )

    def on_batch_complete(self) -> None:
        self._log.debug(
            "Batch done: raw=%d normalized=%d interrupts=%d", self._raw, self._normalized, self._interrupts
        )
        self._raw = self._normalized = self._interrupts = 0


class BufferedInterruptSink(NullSink):
    """Hands interrupts to another thread through a bounded ring buffer."""

    def __init__(self, buffer: Optional[InterruptRingBuffer] = None) -> None:
        # an empty buffer is falsy, so compare with None
        self.buffer = buffer if buffer is not None else InterruptRingBuffer()

    def on_interrupt(self, interrupt: Interrupt) -> None:
        self.buffer.push(interrupt)


class FanOutSink:
    """Forwards every notification to each sink in order."""

    def __init__(self, sinks: Sequence[EventSink]) -> None:
        self._sinks = tuple(sinks)

    def on_raw_sample(self, sample: Sample) -> None:
        for sink in self._sinks:
            sink.on_raw_sample(sample)

    def on_normalized_sample(self, sample: Sample) -> None:
        for sink in self._sinks:
            sink.on_normalized_sample(sample)

    def on_interrupt(self, interrupt: Interrupt) -> None:
        for sink in self._sinks:
            sink.on_interrupt(interrupt)

    def on_batch_complete(self) -> None:
        for sink in self._sinks:
            sink.on_batch_complete()


__all__ = ["RecordingSink", "LoggingSink", "BufferedInterruptSink", "FanOutSink"]
