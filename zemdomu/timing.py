"""Timing helpers for per-file performance telemetry.

Replaces the repeated boilerplate around each lint phase:
    start = time.perf_counter()
    ...
    duration_ms = (time.perf_counter() - start) * 1000
"""

import time
from collections.abc import Generator
from contextlib import contextmanager


class Timer:
    """Lightweight timer that tracks elapsed milliseconds.

    Examples
    --------
    >>> t = Timer()
    >>> t.duration_ms >= 0
    True
    """

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        """Elapsed time in milliseconds since the timer started."""
        return (time.perf_counter() - self._start) * 1000


class PhaseTimings:
    """Named phase durations for one unit of work, in milliseconds.

    Examples
    --------
    >>> timings = PhaseTimings()
    >>> with timings.phase("lint"):
    ...     pass
    >>> sorted(timings.as_dict())
    ['lint']
    """

    __slots__ = ("_phases",)

    def __init__(self) -> None:
        self._phases: dict[str, float] = {}

    @contextmanager
    def phase(self, name: str) -> Generator[Timer, None, None]:
        """Time the block and add its duration to phase ``name``."""
        timer = Timer()
        try:
            yield timer
        finally:
            self._phases[name] = self._phases.get(name, 0.0) + timer.duration_ms

    def as_dict(self) -> dict[str, float]:
        return {name: round(value, 3) for name, value in self._phases.items()}

