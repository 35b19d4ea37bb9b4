"""Interrupt detection core: decode, normalize, detect."""

from .decoder import ByteDecoder
from .detection import EventSink, InterruptDetector, NullSink
from .normalizer import BlockNormalizer
from .pipeline import AudioInterruptPipeline
from .settings import DetectorSettings, load_settings, save_settings
from .sinks import BufferedInterruptSink, FanOutSink, LoggingSink, RecordingSink
from shared.models import Interrupt, NormalizedSample, Sample, SampleBatch

__all__ = [
    "Sample",
    "NormalizedSample",
    "Interrupt",
    "SampleBatch",
    "ByteDecoder",
    "BlockNormalizer",
    "InterruptDetector",
    "AudioInterruptPipeline",
    "DetectorSettings",
    "load_settings",
    "save_settings",
    "EventSink",
    "NullSink",
    "RecordingSink",
    "LoggingSink",
    "BufferedInterruptSink",
    "FanOutSink",
]
