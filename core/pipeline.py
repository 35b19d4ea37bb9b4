from __future__ import annotations

import logging
from typing import Optional, Tuple

from .decoder import ByteDecoder
from .detection.base import EventSink
from .detection.interrupt import InterruptDetector
from .normalizer import BlockNormalizer
from .settings import DetectorSettings

logger = logging.getLogger(__name__)


class AudioInterruptPipeline:
    """
    Finds interrupts in a chunked PCM16 mono byte stream.

    Consecutive `process` calls are treated as one continuous stream: a sample,
    block or interrupt split across calls is handled as if it had arrived in a
    single call. Only the state needed to bridge chunk boundaries is retained,
    so memory stays bounded however long the stream runs.

    One pipeline per producer; calls must not overlap.
    """

    def __init__(
        self,
        settings: Optional[DetectorSettings] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self._settings = settings or DetectorSettings()
        self._settings.validate()
        self._sink = sink
        self._decoder = ByteDecoder()
        self._normalizer = BlockNormalizer(self._settings.block_size)
        self._detector = InterruptDetector(self._settings, sink=sink)
        self._total_interrupts = 0

    @property
    def settings(self) -> DetectorSettings:
        return self._settings

    @property
    def total_interrupts(self) -> int:
        return self._total_interrupts

    @property
    def detector(self) -> InterruptDetector:
        return self._detector

    def reset(self) -> None:
        """Forget all carried state and restart the time counter."""
        self._decoder.reset()
        self._normalizer.reset()
        self._detector.reset()
        self._total_interrupts = 0

    def retained_sizes(self) -> Tuple[int, int, int]:
        """(leftover bytes, leftover raw samples, backfilled normalized samples)."""
        return (
            1 if self._decoder.has_leftover else 0,
            self._normalizer.pending,
            self._detector.backfill_size,
        )

    def process(
        self,
        buffer,
        offset: int = 0,
        length: Optional[int] = None,
        big_endian: bool = True,
    ) -> int:
        """
        Process `length` bytes of `buffer` from `offset`.

        Returns the number of interrupts confirmed during this call. Raises
        ValueError if the byte range does not fit in `buffer`.
        """
        sink = self._sink
        raw = self._decoder.decode(buffer, offset, length, big_endian)
        if sink is not None:
            for sample in raw.samples():
                sink.on_raw_sample(sample)

        normalized = self._normalizer.normalize(raw)
        if sink is not None:
            for sample in normalized.samples():
                sink.on_normalized_sample(sample)

        found = self._detector.scan(normalized)
        self._total_interrupts += len(found)
        if found:
            logger.debug("Confirmed %d interrupt(s) ending at t=%d", len(found), found[-1].end_time)

        if sink is not None:
            sink.on_batch_complete()
        return len(found)


__all__ = ["AudioInterruptPipeline"]
