"""Stream sources and capture-loop helpers that feed the detection pipeline."""

from .backlog import BacklogMonitor, BacklogStats
from .wav_source import WavChunkReader, feed

__all__ = ["BacklogMonitor", "BacklogStats", "WavChunkReader", "feed"]
