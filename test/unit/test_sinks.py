from __future__ import annotations

import logging
import threading

import pytest

from core.detection import EventSink, NullSink
from core.sinks import BufferedInterruptSink, FanOutSink, LoggingSink, RecordingSink
from shared.event_buffer import InterruptRingBuffer
from shared.models import Interrupt, Sample


class TestInterruptRingBuffer:

    def test_push_and_drain(self):
        buf = InterruptRingBuffer(capacity=3)
        buf.push(Interrupt(0, 20))
        buf.push(Interrupt(30, 60))
        assert len(buf) == 2
        assert buf.drain() == [Interrupt(0, 20), Interrupt(30, 60)]
        assert len(buf) == 0
        assert buf.last_end_time == 60

    def test_overflow_drops_oldest(self):
        buf = InterruptRingBuffer(capacity=2)
        for k in range(4):
            buf.push(Interrupt(k * 100, k * 100 + 20))
        found, _ = buf.since()
        assert [i.start_time for i in found] == [200, 300]
        assert buf.dropped == 2

    def test_since_cursor_is_not_destructive(self):
        buf = InterruptRingBuffer()
        buf.push(Interrupt(0, 20))
        buf.push(Interrupt(30, 60))
        found, cursor = buf.since()
        assert found == [Interrupt(0, 20), Interrupt(30, 60)]
        assert cursor == 60

        assert buf.since(cursor) == ([], 60)
        buf.push(Interrupt(100, 140))
        assert buf.since(cursor) == ([Interrupt(100, 140)], 140)
        # another reader starting over still sees everything held
        assert len(buf.since()[0]) == 3
        assert len(buf) == 3

    def test_since_on_empty_keeps_cursor(self):
        buf = InterruptRingBuffer()
        assert buf.since() == ([], None)
        assert buf.since(500) == ([], 500)

    def test_rejects_out_of_order(self):
        buf = InterruptRingBuffer()
        buf.push(Interrupt(100, 200))
        with pytest.raises(ValueError):
            buf.push(Interrupt(50, 200))
        # drained interrupts still set the ordering floor
        buf.drain()
        with pytest.raises(ValueError):
            buf.push(Interrupt(0, 150))

    def test_clear_resets_ordering(self):
        buf = InterruptRingBuffer(capacity=1)
        buf.push(Interrupt(100, 200))
        buf.push(Interrupt(300, 400))
        buf.clear()
        assert len(buf) == 0
        assert buf.dropped == 0
        assert buf.last_end_time is None
        buf.push(Interrupt(0, 20))
        assert buf.drain() == [Interrupt(0, 20)]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            InterruptRingBuffer(capacity=0)

    def test_concurrent_push_and_drain(self):
        buf = InterruptRingBuffer(capacity=10000)
        drained = []

        def producer():
            for k in range(2000):
                buf.push(Interrupt(k, k + 1))

        def consumer():
            for _ in range(200):
                drained.extend(buf.drain())

        threads = [threading.Thread(target=producer), threading.Thread(target=consumer)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        drained.extend(buf.drain())
        assert [i.start_time for i in drained] == list(range(2000))


class TestSinks:

    def test_sinks_satisfy_protocol(self):
        for sink in (NullSink(), RecordingSink(), LoggingSink(), BufferedInterruptSink(), FanOutSink([])):
            assert isinstance(sink, EventSink)

    def test_recording_sink(self):
        sink = RecordingSink()
        sink.on_raw_sample(Sample(0, 5))
        sink.on_normalized_sample(Sample(0, 4))
        sink.on_interrupt(Interrupt(0, 20))
        sink.on_batch_complete()
        assert sink.raw_samples == [Sample(0, 5)]
        assert sink.normalized_samples == [Sample(0, 4)]
        assert sink.interrupts == [Interrupt(0, 20)]
        assert sink.batches == 1

    def test_recording_sink_without_samples(self):
        sink = RecordingSink(keep_samples=False)
        sink.on_raw_sample(Sample(0, 5))
        sink.on_interrupt(Interrupt(0, 20))
        assert sink.raw_samples == []
        assert sink.interrupts == [Interrupt(0, 20)]

    def test_logging_sink(self, caplog):
        sink = LoggingSink()
        with caplog.at_level(logging.DEBUG, logger="core.sinks"):
            sink.on_raw_sample(Sample(0, 1))
            sink.on_interrupt(Interrupt(100, 300))
            sink.on_batch_complete()
        messages = [r.getMessage() for r in caplog.records]
        assert "Interrupt 100-300 (200 ticks)" in messages
        assert "Batch done: raw=1 normalized=0 interrupts=1" in messages

    def test_buffered_sink_uses_callers_empty_buffer(self):
        ring = InterruptRingBuffer(capacity=4)
        assert len(ring) == 0
        sink = BufferedInterruptSink(ring)
        assert sink.buffer is ring
        sink.on_raw_sample(Sample(0, 1))
        sink.on_interrupt(Interrupt(0, 30))
        assert ring.drain() == [Interrupt(0, 30)]

    def test_buffered_sink_default_buffer(self):
        sink = BufferedInterruptSink()
        sink.on_interrupt(Interrupt(0, 30))
        assert sink.buffer.since() == ([Interrupt(0, 30)], 30)

    def test_fan_out_preserves_order(self):
        a, b = RecordingSink(), RecordingSink()
        fan = FanOutSink([a, b])
        fan.on_raw_sample(Sample(1, 2))
        fan.on_normalized_sample(Sample(1, 2))
        fan.on_interrupt(Interrupt(1, 40))
        fan.on_batch_complete()
        for sink in (a, b):
            assert sink.raw_samples == [Sample(1, 2)]
            assert sink.interrupts == [Interrupt(1, 40)]
            assert sink.batches == 1


class TestRecords:

    def test_sample_range(self):
        Sample(0, -32768)
        Sample(0, 32767)
        with pytest.raises(ValueError):
            Sample(0, 32768)

    def test_interrupt_order(self):
        assert Interrupt(10, 40).duration == 30
        with pytest.raises(ValueError):
            Interrupt(40, 10)
