from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from shared.models import Interrupt, SampleBatch
from shared.sample_window import SampleWindow

from ..settings import DetectorSettings
from .base import EventSink

logger = logging.getLogger(__name__)

NO_END = -1


@dataclass
class DetectorState:
    """Interrupt-tracking state carried between calls."""

    inside: bool = False
    start_time: int = 0
    # window index where the amplitude first fell back under threshold
    possible_end_index: int = NO_END
    # side of zero of the candidate (+1 / -1)
    sign: int = 0
    # side of zero of the last confirmed interrupt, 0 before the first one
    last_sign: int = 0

    def leave(self) -> None:
        self.inside = False
        self.start_time = 0
        self.possible_end_index = NO_END


class InterruptDetector:
    """
    Hysteresis detector over a stream of normalized samples.

    An interrupt starts on a steep excursion past the threshold and ends once
    the amplitude has stayed back under the threshold for longer than the
    confirmation window. Only the last few normalized samples are retained
    between calls (the backfill), which is enough for the look-back slope
    check and for rewinding to a pending end, so results do not depend on how
    the stream was split.
    """

    def __init__(self, settings: Optional[DetectorSettings] = None, sink: Optional[EventSink] = None) -> None:
        self._settings = settings or DetectorSettings()
        self._settings.validate()
        self._sink = sink
        self._window = SampleWindow()
        self._state = DetectorState()

    @property
    def settings(self) -> DetectorSettings:
        return self._settings

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def backfill_size(self) -> int:
        return len(self._window)

    def reset(self) -> None:
        self._window.clear()
        self._state = DetectorState()

    def scan(self, normalized: SampleBatch) -> List[Interrupt]:
        """Run the state machine over `normalized`; return interrupts confirmed now."""
        cfg = self._settings
        st = self._state
        first_new = len(self._window)
        self._window.append(normalized)

        window = self._window.view()
        times = window.times.tolist()
        amps = window.amplitudes.tolist()
        n = len(times)
        found: List[Interrupt] = []

        # backfilled samples were evaluated by the previous call
        i = first_new
        while i < n:
            amp = amps[i]
            if st.inside:
                if amp * st.sign > cfg.threshold:
                    st.possible_end_index = NO_END
                    if times[i] - st.start_time > cfg.max_duration:
                        logger.debug(
                            "Dropped candidate at t=%d: exceeded %d ticks", st.start_time, cfg.max_duration
                        )
                        st.leave()
                elif st.possible_end_index == NO_END:
                    st.possible_end_index = i
                else:
                    end_index = st.possible_end_index
                    end_time = times[end_index]
                    if times[i] - end_time > cfg.confirm_window:
                        if end_time - st.start_time >= cfg.min_duration:
                            interrupt = Interrupt(st.start_time, end_time)
                            found.append(interrupt)
                            st.last_sign = st.sign
                            if self._sink is not None:
                                self._sink.on_interrupt(interrupt)
                        else:
                            logger.debug(
                                "Dropped candidate at t=%d: shorter than %d ticks",
                                st.start_time,
                                cfg.min_duration,
                            )
                        st.leave()
                        # re-examine from the end so a pulse that began while the
                        # end was being confirmed is not missed
                        i = end_index
                        continue
            elif abs(amp) > cfg.threshold:
                sign = -1 if amp < 0 else 1
                if not cfg.require_alternation or sign != st.last_sign:
                    before = amps[i - cfg.slope_lookback] if i >= cfg.slope_lookback else 0
                    if (amp - before) * sign > cfg.min_slope_delta:
                        st.inside = True
                        st.start_time = times[i]
                        st.sign = sign
            i += 1

        self._retain_backfill(n)
        return found

    def _retain_backfill(self, n: int) -> None:
        st = self._state
        pending_end = st.inside and st.possible_end_index != NO_END
        keep_from = (st.possible_end_index if pending_end else n) - self._settings.backfill_window
        keep_from = max(keep_from, 0)
        self._window.drop_oldest(keep_from)
        if pending_end:
            st.possible_end_index -= keep_from
            assert 0 <= st.possible_end_index < len(self._window), "pending end fell outside backfill"


__all__ = ["DetectorState", "InterruptDetector", "NO_END"]
