from __future__ import annotations

import numpy as np

from .models import AMPLITUDE_DTYPE, TIME_DTYPE, SampleBatch


class SampleWindow:
    """
    Sliding window over the most recent samples of a stream.

    New samples are appended at the end and the oldest ones are dropped from
    the front once they are no longer needed. Indices are relative to the
    current oldest sample, so they shift after `drop_oldest`.

    Not thread-safe; a window belongs to a single detector.
    """

    def __init__(self) -> None:
        self._times = np.empty(0, dtype=TIME_DTYPE)
        self._amplitudes = np.empty(0, dtype=AMPLITUDE_DTYPE)

    def __len__(self) -> int:
        return int(self._times.shape[0])

    def append(self, batch: SampleBatch) -> None:
        """Append `batch` after the newest sample."""
        if not len(batch):
            return
        if len(self) and batch.times[0] <= self._times[-1]:
            raise ValueError("appended samples must be newer than the window contents")
        self._times = np.concatenate((self._times, batch.times))
        self._amplitudes = np.concatenate((self._amplitudes, batch.amplitudes))

    def drop_oldest(self, count: int) -> None:
        """Discard the `count` oldest samples."""
        if not 0 <= count <= len(self):
            raise ValueError("count out of range")
        if count == 0:
            return
        # Copy so the dropped prefix is released rather than kept alive by a view.
        self._times = self._times[count:].copy()
        self._amplitudes = self._amplitudes[count:].copy()

    def last(self, count: int) -> SampleBatch:
        """Return the newest `count` samples (fewer if the window is shorter)."""
        if count < 0:
            raise ValueError("count must be non-negative")
        if count == 0:
            return SampleBatch.empty()
        return SampleBatch(self._times[-count:], self._amplitudes[-count:])

    def view(self) -> SampleBatch:
        """Snapshot of the whole window, oldest first."""
        return SampleBatch(self._times, self._amplitudes)

    def clear(self) -> None:
        self.drop_oldest(len(self))


__all__ = ["SampleWindow"]
