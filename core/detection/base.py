from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared.models import Interrupt, Sample


@runtime_checkable
class EventSink(Protocol):
    """Receives pipeline output as it is produced.

    Implemented by displays, loggers and test harnesses. Notifications are
    delivered synchronously on the thread that called `process`.
    """

    def on_raw_sample(self, sample: Sample) -> None:
        ...

    def on_normalized_sample(self, sample: Sample) -> None:
        ...

    def on_interrupt(self, interrupt: Interrupt) -> None:
        ...

    def on_batch_complete(self) -> None:
        """Called once per processed chunk, after all other notifications."""
        ...


class NullSink:
    """Sink that ignores everything."""

    def on_raw_sample(self, sample: Sample) -> None:
        pass

    def on_normalized_sample(self, sample: Sample) -> None:
        pass

    def on_interrupt(self, interrupt: Interrupt) -> None:
        pass

    def on_batch_complete(self) -> None:
        pass


__all__ = ["EventSink", "NullSink"]
