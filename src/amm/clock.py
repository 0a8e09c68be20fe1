"""Источники времени движка (unix, секунды)."""

import time
from typing import Protocol


class Clock(Protocol):
    """Источник текущего времени."""

    def now(self) -> int:
        ...


class SystemClock:
    """Системное время."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """
    Управляемое время для симуляций и тестов.

    Время не убывает: set() в прошлое отклоняется.
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> int:
        if timestamp < self._now:
            raise ValueError(f"clock cannot go backwards: {timestamp} < {self._now}")
        self._now = timestamp
        return self._now
