from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np

# Nominal symmetric bound used by the detection thresholds. The true int16
# minimum is one lower; detection keeps the symmetric value.
AMPLITUDE_MAX_VALUE = 32767
AMPLITUDE_MIN_VALUE = -32768

# Time of the first decoded raw sample. One tick per raw sample.
TIME_MIN_VALUE = 0

TIME_DTYPE = np.int64
AMPLITUDE_DTYPE = np.int16


def _freeze_array(array: np.ndarray, *, dtype: np.dtype, ndim: int | None = None) -> np.ndarray:
    """Return a read-only, C-contiguous copy of `array`, validating dimensions."""
    arr = np.array(array, dtype=dtype, copy=True, order="C")
    if ndim is not None and arr.ndim != ndim:
        raise ValueError(f"array must be {ndim}D, got {arr.ndim}D")
    arr.setflags(write=False)
    return arr


# ----------------------------
# Scalar records
# ----------------------------

@dataclass(frozen=True)
class Sample:
    """One amplitude value at one time tick.

    Raw samples come straight out of the byte decoder. Normalized samples have
    the same shape: the amplitude is the truncated mean of one block of raw
    samples and the time is the time of the first raw sample in that block.
    """

    time: int
    amplitude: int

    def __post_init__(self) -> None:
        if not AMPLITUDE_MIN_VALUE <= self.amplitude <= AMPLITUDE_MAX_VALUE:
            raise ValueError(f"amplitude {self.amplitude} outside 16-bit range")


NormalizedSample = Sample


@dataclass(frozen=True)
class Interrupt:
    """A confirmed pulse, in raw sample ticks."""

    start_time: int
    end_time: int

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError("end_time must not precede start_time")

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


# ----------------------------
# Streaming data models
# ----------------------------

@dataclass(frozen=True)
class SampleBatch:
    """Run of consecutive samples passed between pipeline stages.

    Stored column-wise so stages can work on whole arrays; use `samples()` when
    per-sample records are needed (sink notifications, tests).
    """

    times: np.ndarray
    amplitudes: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        times = _freeze_array(self.times, dtype=TIME_DTYPE, ndim=1)
        amplitudes = _freeze_array(self.amplitudes, dtype=AMPLITUDE_DTYPE, ndim=1)
        if times.shape != amplitudes.shape:
            raise ValueError("times and amplitudes must have the same length")
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "amplitudes", amplitudes)

    @classmethod
    def empty(cls) -> "SampleBatch":
        return cls(np.empty(0, dtype=TIME_DTYPE), np.empty(0, dtype=AMPLITUDE_DTYPE))

    @classmethod
    def concat(cls, *batches: "SampleBatch") -> "SampleBatch":
        parts = [b for b in batches if len(b)]
        if not parts:
            return cls.empty()
        if len(parts) == 1:
            return parts[0]
        return cls(
            np.concatenate([b.times for b in parts]),
            np.concatenate([b.amplitudes for b in parts]),
        )

    def __len__(self) -> int:
        return int(self.times.shape[0])

    def samples(self) -> Iterator[Sample]:
        for t, a in zip(self.times.tolist(), self.amplitudes.tolist()):
            yield Sample(t, a)


__all__ = [
    "AMPLITUDE_MAX_VALUE",
    "AMPLITUDE_MIN_VALUE",
    "TIME_MIN_VALUE",
    "Sample",
    "NormalizedSample",
    "Interrupt",
    "SampleBatch",
]
