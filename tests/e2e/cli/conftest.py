"""Fixtures for end-to-end CLI tests.

Every invocation writes its flight recorder into the test's temporary
directory and runs inside an isolated filesystem, so report directories and
log files never leak between tests.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from contractsuite.config import PACKAGES_ENV, SKIP_CLASSES_ENV

# pylint: disable=redefined-outer-name


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Flight recorder destination for one test."""
    return tmp_path / "logs" / "latest.log"


@pytest.fixture
def runner(log_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Return a CliRunner with a clean contractsuite environment."""
    monkeypatch.delenv(PACKAGES_ENV, raising=False)
    monkeypatch.delenv(SKIP_CLASSES_ENV, raising=False)
    monkeypatch.delenv("CONTRACTSUITE_LOGGER_LEVELS", raising=False)
    return CliRunner(env={"CONTRACTSUITE_LOG_PATH": str(log_path)})


@pytest.fixture
def fs(runner: CliRunner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield
