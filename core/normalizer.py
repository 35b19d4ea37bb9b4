from __future__ import annotations

import numpy as np

from shared.models import SampleBatch


class BlockNormalizer:
    """Down-sample raw samples by averaging fixed-size blocks.

    Raw samples that do not fill a whole block are kept and completed by the
    next call, so the output does not depend on how the input was chunked.
    """

    def __init__(self, block_size: int = 10) -> None:
        if block_size <= 0:
            raise ValueError("block_size must be positive")
        self._block_size = int(block_size)
        self._leftover = SampleBatch.empty()

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def pending(self) -> int:
        """Raw samples waiting for their block to fill."""
        return len(self._leftover)

    def reset(self) -> None:
        self._leftover = SampleBatch.empty()

    def normalize(self, batch: SampleBatch) -> SampleBatch:
        raw = SampleBatch.concat(self._leftover, batch)
        n_blocks = len(raw) // self._block_size
        used = n_blocks * self._block_size
        self._leftover = SampleBatch(raw.times[used:], raw.amplitudes[used:])
        if n_blocks == 0:
            return SampleBatch.empty()

        sums = raw.amplitudes[:used].astype(np.int64).reshape(n_blocks, self._block_size).sum(axis=1)
        # integer mean truncated toward zero
        means = np.sign(sums) * (np.abs(sums) // self._block_size)
        return SampleBatch(raw.times[:used : self._block_size], means)


__all__ = ["BlockNormalizer"]
