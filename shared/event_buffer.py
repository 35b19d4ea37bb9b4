from __future__ import annotations

from collections import deque
from threading import Lock
from typing import Deque, List, Optional, Tuple

from .models import Interrupt


class InterruptRingBuffer:
    """
    Recent confirmed interrupts, shared between the capture loop and readers.

    Interrupts are confirmed in stream order, so their end times strictly
    increase and the end time doubles as a read cursor: a display can poll
    `since(cursor)` without consuming anything, while a single consumer can
    `drain()` instead. Once `capacity` interrupts are held the oldest is
    evicted and counted in `dropped`.
    """

    def __init__(self, capacity: int = 1000) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._interrupts: Deque[Interrupt] = deque()
        self._last_end: Optional[int] = None
        self._lock = Lock()
        self._dropped = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    @property
    def last_end_time(self) -> Optional[int]:
        """End time of the newest interrupt ever pushed, None before the first."""
        with self._lock:
            return self._last_end

    def push(self, interrupt: Interrupt) -> None:
        with self._lock:
            if self._last_end is not None and interrupt.end_time <= self._last_end:
                raise ValueError(
                    f"interrupt ending at {interrupt.end_time} is not newer than {self._last_end}"
                )
            if len(self._interrupts) == self._capacity:
                self._interrupts.popleft()
                self._dropped += 1
            self._interrupts.append(interrupt)
            self._last_end = interrupt.end_time

    def since(self, after_time: Optional[int] = None) -> Tuple[List[Interrupt], Optional[int]]:
        """
        Return held interrupts ending after `after_time` and the cursor to pass
        on the next call. The cursor is unchanged when nothing new arrived.
        """
        with self._lock:
            if after_time is None:
                found = list(self._interrupts)
            else:
                found = [it for it in self._interrupts if it.end_time > after_time]
        if not found:
            return [], after_time
        return found, found[-1].end_time

    def drain(self) -> List[Interrupt]:
        """Remove and return every held interrupt, oldest first."""
        with self._lock:
            found = list(self._interrupts)
            self._interrupts.clear()
            return found

    def clear(self) -> None:
        """Forget held interrupts and the ordering cursor, e.g. after a pipeline reset."""
        with self._lock:
            self._interrupts.clear()
            self._last_end = None
            self._dropped = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._interrupts)


__all__ = ["InterruptRingBuffer"]
