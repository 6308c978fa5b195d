"""
Shared test fixtures.
"""

from pathlib import Path

import pytest

from tests.fakes import LINUX_TOOLS, FakeRunner, RecordingReporter, make_bin_dir


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def linux_bin(tmp_path: Path) -> Path:
    """A bin directory with the full Linux toolchain."""
    return make_bin_dir(tmp_path, LINUX_TOOLS)
