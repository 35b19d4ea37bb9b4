from __future__ import annotations

from typing import Optional

import numpy as np

from shared.models import AMPLITUDE_DTYPE, TIME_DTYPE, TIME_MIN_VALUE, SampleBatch


class ByteDecoder:
    """
    Incremental PCM16 mono decoder.

    Bytes may arrive in chunks of any size. An odd trailing byte is held back
    and paired with the first byte of the next call, so a sample split across
    two chunks decodes exactly as if it had arrived in one. Every decoded
    sample takes the next tick of a running time counter.
    """

    def __init__(self, start_time: int = TIME_MIN_VALUE) -> None:
        self._start_time = int(start_time)
        self._time = self._start_time
        self._leftover: Optional[bytes] = None

    @property
    def next_time(self) -> int:
        """Time that will be assigned to the next decoded sample."""
        return self._time

    @property
    def has_leftover(self) -> bool:
        return self._leftover is not None

    def reset(self) -> None:
        self._time = self._start_time
        self._leftover = None

    def decode(
        self,
        buffer,
        offset: int = 0,
        length: Optional[int] = None,
        big_endian: bool = True,
    ) -> SampleBatch:
        """
        Decode `length` bytes of `buffer` starting at `offset`.

        Raises ValueError when the requested range does not fit in `buffer`.
        """
        view = memoryview(buffer).cast("B")
        if length is None:
            length = len(view) - offset
        if offset < 0:
            raise ValueError("offset must be non-negative")
        if length < 0:
            raise ValueError("length must be non-negative")
        if offset + length > len(view):
            raise ValueError(
                f"offset + length ({offset + length}) exceeds buffer size ({len(view)})"
            )
        if length == 0:
            return SampleBatch.empty()

        data = view[offset : offset + length].tobytes()
        if self._leftover is not None:
            data = self._leftover + data

        n_even = len(data) - (len(data) % 2)
        self._leftover = data[n_even:] if n_even < len(data) else None

        n_samples = n_even // 2
        if n_samples == 0:
            return SampleBatch.empty()

        dtype = np.dtype(">i2" if big_endian else "<i2")
        amplitudes = np.frombuffer(data, dtype=dtype, count=n_samples).astype(AMPLITUDE_DTYPE)
        times = np.arange(self._time, self._time + n_samples, dtype=TIME_DTYPE)
        self._time += n_samples
        return SampleBatch(times, amplitudes)


__all__ = ["ByteDecoder"]
