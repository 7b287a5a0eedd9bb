"""Elapsed-time measurement.

Example:
    stopwatch = Stopwatch()
    run_round()
    print(f"took {stopwatch.stop():.3f}s")

    with RuntimeReport(emit=console.print):
        run_round()  # prints "runtime: 0.512345s" on exit
"""

from __future__ import annotations

import logging
import time
from types import TracebackType
from typing import Callable

logger = logging.getLogger(__name__)


class Stopwatch:
    """Monotonic stopwatch; ``stop`` reads the elapsed time without resetting."""

    def __init__(self, start: bool = True) -> None:
        self._started: float | None = None
        if start:
            self.start()

    def start(self) -> None:
        self._started = time.monotonic()

    def stop(self) -> float:
        """Seconds since the last ``start``."""
        if self._started is None:
            raise RuntimeError("stopwatch was never started")
        return time.monotonic() - self._started


class RuntimeReport:
    """Report total runtime of a block when it exits."""

    def __init__(
        self,
        stopwatch: Stopwatch | None = None,
        emit: Callable[[str], object] | None = None,
    ) -> None:
        self.stopwatch = stopwatch or Stopwatch()
        self._emit = emit

    def report(self) -> float:
        elapsed = round(self.stopwatch.stop(), 6)
        line = f"runtime: {elapsed}s"
        if self._emit is not None:
            self._emit(line)
        else:
            logger.info(line)
        return elapsed

    def __enter__(self) -> RuntimeReport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.report()
