"""
End-to-end tests: file replay → pipeline → sinks → display thread.

Mirrors how a capture application wires the pieces together: a producer loop
reads chunks and feeds the pipeline, a display thread drains confirmed
interrupts from the ring buffer, and a backlog monitor watches the device.
"""
from __future__ import annotations

import logging
import queue
import threading
import wave
from pathlib import Path

import pytest

from core import AudioInterruptPipeline, BufferedInterruptSink, FanOutSink, LoggingSink, RecordingSink
from daq.backlog import BacklogMonitor
from daq.wav_source import WavChunkReader
from shared.event_buffer import InterruptRingBuffer
from test.fixtures.signal_generators import add_noise, make_alternating_pulses, to_pcm_bytes


@pytest.fixture
def pulse_file(tmp_path: Path):
    signal, expected = make_alternating_pulses(12, width=150, gap=450)
    signal = add_noise(signal, 800.0, seed=7)
    path = tmp_path / "flow_meter.wav"
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(88200)
        wav.writeframes(to_pcm_bytes(signal, big_endian=False))
    return path, expected


def test_replay_with_display_thread(pulse_file, caplog):
    path, expected = pulse_file
    ring = InterruptRingBuffer(capacity=64)
    recorder = RecordingSink(keep_samples=False)
    pipeline = AudioInterruptPipeline(sink=FanOutSink([recorder, BufferedInterruptSink(ring), LoggingSink()]))

    displayed = []
    done = threading.Event()

    def display_loop():
        cursor = None
        while not done.is_set():
            found, cursor = ring.since(cursor)
            displayed.extend(found)
            done.wait(0.001)
        displayed.extend(ring.since(cursor)[0])

    display = threading.Thread(target=display_loop, daemon=True)
    display.start()

    counts = []
    with caplog.at_level(logging.INFO, logger="core.sinks"):
        with WavChunkReader(path, chunk_bytes=181) as reader:
            for chunk in reader:
                counts.append(pipeline.process(chunk, 0, len(chunk), reader.big_endian))

    done.set()
    display.join(timeout=2.0)

    got = [(i.start_time, i.end_time) for i in recorder.interrupts]
    assert got == expected
    assert sum(counts) == len(expected)
    assert [(i.start_time, i.end_time) for i in displayed] == expected
    assert sum("Interrupt" in r.getMessage() for r in caplog.records) == len(expected)
    assert recorder.batches == len(counts)


def test_capture_loop_reports_backlog(pulse_file, caplog):
    """A consumer that falls behind sees warnings but loses no interrupts."""
    path, expected = pulse_file
    device: "queue.Queue[bytes]" = queue.Queue()
    with WavChunkReader(path, chunk_bytes=180) as reader:
        for chunk in reader:
            device.put(chunk)

    capacity = 180 * 8
    monitor = BacklogMonitor()
    pipeline = AudioInterruptPipeline()
    total = 0
    with caplog.at_level(logging.WARNING, logger="daq.backlog"):
        while not device.empty():
            chunk = device.get_nowait()
            monitor.check(min(device.qsize() * 180, capacity), capacity)
            total += pipeline.process(chunk, 0, len(chunk), False)

    assert total == len(expected)
    assert monitor.stats.warnings > 0
    assert any("Getting behind" in r.getMessage() for r in caplog.records)
