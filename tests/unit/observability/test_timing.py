"""Tests for elapsed-time measurement."""

from __future__ import annotations

import logging
import time

import pytest

from taskshare.observability.timing import RuntimeReport, Stopwatch


class TestStopwatch:
    """Tests for Stopwatch."""

    def test_measures_elapsed(self) -> None:
        """Stop returns seconds since start."""
        stopwatch = Stopwatch()
        time.sleep(0.05)

        assert stopwatch.stop() >= 0.05

    def test_stop_does_not_reset(self) -> None:
        """Successive stops keep growing."""
        stopwatch = Stopwatch()
        first = stopwatch.stop()

        assert stopwatch.stop() >= first

    def test_not_started(self) -> None:
        """A stopwatch created stopped cannot be read."""
        with pytest.raises(RuntimeError):
            Stopwatch(start=False).stop()


class TestRuntimeReport:
    """Tests for RuntimeReport."""

    def test_emits_on_exit(self) -> None:
        """The runtime line is emitted when the block ends."""
        lines: list[str] = []

        with RuntimeReport(emit=lines.append):
            pass

        assert len(lines) == 1
        assert lines[0].startswith("runtime: ")
        assert lines[0].endswith("s")

    def test_logs_without_emitter(self, caplog: pytest.LogCaptureFixture) -> None:
        """Without an emitter the line is logged."""
        with caplog.at_level(logging.INFO, logger="taskshare.observability.timing"):
            elapsed = RuntimeReport().report()

        assert elapsed >= 0
        assert "runtime: " in caplog.text
