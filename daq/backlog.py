from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class BacklogStats:
    checks: int = 0
    warnings: int = 0
    peak_available: int = 0


class BacklogMonitor:
    """
    Warns when a capture device buffer is filling faster than it is drained.

    The detection pipeline applies no backpressure of its own, so the capture
    loop calls `check` after each read with the bytes still waiting in the
    device buffer. Anything above `warn_fraction` of capacity means the loop
    is falling behind and audio will soon be lost.
    """

    def __init__(self, warn_fraction: float = 0.5) -> None:
        if not 0.0 < warn_fraction <= 1.0:
            raise ValueError("warn_fraction must be in (0, 1]")
        self._warn_fraction = float(warn_fraction)
        self.stats = BacklogStats()

    def check(self, available: int, capacity: int) -> bool:
        """Return True (and log a warning) if `available` exceeds the margin."""
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if available < 0:
            raise ValueError("available must be non-negative")
        self.stats.checks += 1
        self.stats.peak_available = max(self.stats.peak_available, available)
        if available > capacity * self._warn_fraction:
            self.stats.warnings += 1
            logger.warning("Getting behind! %d of %d buffered bytes waiting", available, capacity)
            return True
        return False


__all__ = ["BacklogMonitor", "BacklogStats"]
