"""
Stopwatch for timing a game.
"""
import time
from typing import Callable, Optional


class Stopwatch:
    """
    Accumulates running time between start and stop calls.

    Args:
        clock: Returns the current time in seconds. Defaults to
            ``time.monotonic``; tests pass a fake clock.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.monotonic
        self._elapsed = 0.0
        self._started_at = 0.0
        self._running = False

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._started_at = self._clock()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._elapsed += self._clock() - self._started_at

    def reset(self) -> None:
        self._running = False
        self._elapsed = 0.0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def elapsed(self) -> float:
        """Total running time in seconds."""
        if self._running:
            return self._elapsed + self._clock() - self._started_at
        return self._elapsed
