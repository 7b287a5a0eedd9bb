"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from taskshare.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    configure_logging,
    participant_var,
    phase_var,
)


def make_record(message: str = "Claimed 3 tasks", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="taskshare.jobs.distributor",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """Tests for LogContext."""

    def test_sets_and_resets(self) -> None:
        """Context values apply only inside the block."""
        with LogContext(participant="node1-42", phase="quota"):
            assert participant_var.get() == "node1-42"
            assert phase_var.get() == "quota"

        assert participant_var.get() == ""
        assert phase_var.get() == ""

    def test_nesting(self) -> None:
        """Inner contexts restore the outer values."""
        with LogContext(participant="node1-42"):
            with LogContext(phase="sweep"):
                assert participant_var.get() == "node1-42"
                assert phase_var.get() == "sweep"
            assert phase_var.get() == ""

    def test_unknown_key(self) -> None:
        """Only known context keys are accepted."""
        with pytest.raises(ValueError):
            LogContext(tenant="x")


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_fields(self) -> None:
        """Records render as JSON with the standard fields."""
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "taskshare.jobs.distributor"
        assert data["message"] == "Claimed 3 tasks"
        assert "timestamp" in data
        assert "participant" not in data

    def test_includes_context(self) -> None:
        """Participant and phase are attached."""
        with LogContext(participant="node1-42", phase="sweep"):
            data = json.loads(JsonFormatter().format(make_record()))

        assert data["participant"] == "node1-42"
        assert data["phase"] == "sweep"

    def test_extra_fields(self) -> None:
        """Extra attributes are serialized, falling back to str."""
        data = json.loads(JsonFormatter().format(make_record(quota=3, obj=object())))

        assert data["quota"] == 3
        assert data["obj"].startswith("<object")

    def test_exception_info(self) -> None:
        """Exception details are included."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "boom"


class TestConsoleFormatter:
    """Tests for ConsoleFormatter."""

    def test_plain_line(self) -> None:
        """Lines carry level, logger and message."""
        line = ConsoleFormatter(use_colors=False).format(make_record())

        assert "| INFO     |" in line
        assert "taskshare.jobs.distributor" in line
        assert line.endswith("Claimed 3 tasks")

    def test_context_suffix(self) -> None:
        """Context is appended after the message."""
        with LogContext(participant="node1-42", phase="quota"):
            line = ConsoleFormatter(use_colors=False).format(make_record())

        assert line.endswith("Claimed 3 tasks | node1-42/quota")


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json(self) -> None:
        """JSON mode installs a single JSON handler."""
        configure_logging(json_format=True, level="debug")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_console(self) -> None:
        """Console mode installs the readable formatter."""
        configure_logging(json_format=False, level="WARNING")

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)
