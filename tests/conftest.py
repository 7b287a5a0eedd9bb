"""Global pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: runs real participant processes against a shared directory"
    )
    config.addinivalue_line("markers", "slow: spends a second or more inside barrier windows")


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Empty shared directory for one round."""
    shared = tmp_path / "shared"
    shared.mkdir()
    return shared
