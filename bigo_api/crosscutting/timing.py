"""
===============================================================================
MODULE: Timing utilities (Timer)
===============================================================================

CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  Timer

Responsibilities:
  - Measure elapsed time without external dependencies
  - Expose results in ms for logs

Collaborators:
  - crosscutting/middleware.py (request duration)
===============================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Timer:
    """perf_counter stopwatch; usable manually or as a context manager."""

    _start_time: Optional[float] = field(default=None, repr=False)
    _end_time: Optional[float] = field(default=None, repr=False)

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._end_time = None
        return self

    def stop(self) -> "Timer":
        if self._start_time is None:
            raise RuntimeError("Timer not started")
        self._end_time = time.perf_counter()
        return self

    @property
    def elapsed_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time or time.perf_counter()
        return end - self._start_time

    @property
    def elapsed_ms(self) -> float:
        return round(self.elapsed_seconds * 1000, 2)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()
