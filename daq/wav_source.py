# daq/wav_source.py
"""Replay a mono PCM16 WAV file as a stream of raw byte chunks."""

from __future__ import annotations

import logging
import wave
from pathlib import Path
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)


class WavChunkReader:
    """
    Reads the frame data of a WAV file in fixed-size byte chunks.

    Chunk sizes need not be a multiple of the sample width; the detection
    pipeline stitches split samples back together. WAV data is always
    little-endian.

    Use as a context manager:

        with WavChunkReader(path, chunk_bytes=180) as reader:
            total = feed(pipeline, reader, reader.big_endian)
    """

    big_endian = False

    def __init__(self, path: str | Path, chunk_bytes: int = 180) -> None:
        if chunk_bytes <= 0:
            raise ValueError("chunk_bytes must be positive")
        self._path = Path(path)
        self._chunk_bytes = int(chunk_bytes)
        self._wav: Optional[wave.Wave_read] = None
        self._sample_rate = 0
        self._n_frames = 0
        self._bytes_read = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def n_frames(self) -> int:
        return self._n_frames

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    def open(self) -> "WavChunkReader":
        if self._wav is not None:
            return self
        if not self._path.exists():
            raise ValueError(f"File not found: {self._path}")
        try:
            wav = wave.open(str(self._path), "rb")
        except (wave.Error, EOFError) as exc:
            raise ValueError(f"Failed to open WAV file: {exc}") from exc

        if wav.getnchannels() != 1 or wav.getsampwidth() != 2:
            n_channels, width = wav.getnchannels(), wav.getsampwidth()
            wav.close()
            raise ValueError(
                f"{self._path.name}: expected mono 16-bit PCM, got {n_channels} channel(s) of {width * 8}-bit"
            )

        self._wav = wav
        self._sample_rate = wav.getframerate()
        self._n_frames = wav.getnframes()
        self._bytes_read = 0
        logger.info(
            "Opened WAV file: %s (%d Hz, %d frames)", self._path.name, self._sample_rate, self._n_frames
        )
        return self

    def close(self) -> None:
        if self._wav is not None:
            self._wav.close()
            self._wav = None

    def __enter__(self) -> "WavChunkReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[bytes]:
        if self._wav is None:
            raise RuntimeError("WAV file is not open; call open() first")
        frames_per_read = self._chunk_bytes // 2 + 1
        pending = bytearray()
        while True:
            data = self._wav.readframes(frames_per_read)
            if not data:
                break
            pending.extend(data)
            while len(pending) >= self._chunk_bytes:
                chunk = bytes(pending[: self._chunk_bytes])
                del pending[: self._chunk_bytes]
                self._bytes_read += len(chunk)
                yield chunk
        if pending:
            self._bytes_read += len(pending)
            yield bytes(pending)
        logger.debug("Finished reading %s: %d bytes", self._path.name, self._bytes_read)


def feed(pipeline, chunks: Iterable[bytes], big_endian: bool) -> int:
    """Push every chunk through `pipeline`; return the total interrupt count."""
    total = 0
    for chunk in chunks:
        total += pipeline.process(chunk, 0, len(chunk), big_endian)
    return total


__all__ = ["WavChunkReader", "feed"]
