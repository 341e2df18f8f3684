"""Unit tests for the logging helpers."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from contractsuite.adapters.runner import run_units
from contractsuite.logging import (
    CaseContextFilter,
    LoggingSetup,
    config_console_handler,
    config_flight_recorder,
    configure_logging,
    current_case,
    log_startup,
    running_case,
)
from contractsuite.service_layer.units import ClassTestsUnit

# pylint: disable=too-few-public-methods


def make_record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)


def filtered(name: str) -> logging.LogRecord:
    record = make_record(name)
    assert CaseContextFilter().filter(record) is True
    return record


@pytest.fixture
def restore_root():
    """configure_logging replaces the root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# ============================================================================
#                               Case context
# ============================================================================


def test_running_case_is_scoped():
    assert current_case() is None
    with running_case("NamedContract::test_name"):
        assert current_case() == "NamedContract::test_name"
        with running_case("AgedContract::test_age"):
            assert current_case() == "AgedContract::test_age"
        assert current_case() == "NamedContract::test_name"
    assert current_case() is None


@pytest.mark.parametrize(
    ("name", "prefix"),
    [
        ("contractsuite.service_layer.resolver", ""),
        ("urllib3.connectionpool", "[urllib3]"),
        ("shapes", "[shapes]"),
    ],
)
def test_prefix_outside_a_case(name, prefix):
    """Only records from outside the project get a bracketed prefix."""
    record = filtered(name)
    assert record.prefix == prefix  # type: ignore[attr-defined]
    assert record.case == ""  # type: ignore[attr-defined]


def test_prefix_inside_a_case():
    """Records emitted by code under test name the case that ran it."""
    with running_case("NamedContract::test_name"):
        ours = filtered("contractsuite.adapters.runner")
        theirs = filtered("shapes.widget")
    assert ours.prefix == ""  # type: ignore[attr-defined]
    assert ours.case == " (NamedContract::test_name)"  # type: ignore[attr-defined]
    expected = "[shapes @ NamedContract::test_name]"
    assert theirs.prefix == expected  # type: ignore[attr-defined]


def test_runner_sets_the_case(caplog):
    """The in-process runner tags records logged while a case runs."""

    class Chatty:
        def test_logs(self):
            logging.getLogger("shapes").warning("resizing")

    with caplog.at_level(logging.WARNING, logger="shapes"):
        caplog.handler.addFilter(CaseContextFilter())
        run_units([ClassTestsUnit(Chatty)])

    (record,) = [r for r in caplog.records if r.name == "shapes"]
    assert record.prefix.startswith("[shapes @ ")  # type: ignore[attr-defined]
    assert record.prefix.endswith("::test_logs]")  # type: ignore[attr-defined]


# ============================================================================
#                               Handlers
# ============================================================================


def test_console_handler_levels():
    """Debug mode forces DEBUG; both modes carry the case filter."""
    quiet = config_console_handler(logging.WARNING)
    assert isinstance(quiet, RichHandler)
    assert quiet.level == logging.WARNING
    assert any(isinstance(f, CaseContextFilter) for f in quiet.filters)

    loud = config_console_handler(logging.WARNING, debug_mode=True, color=False)
    assert loud.level == logging.DEBUG
    assert any(isinstance(f, CaseContextFilter) for f in loud.filters)


def test_flight_recorder_flushes_on_error(tmp_path):
    """Buffered debug records reach the file once an error is logged."""
    path = tmp_path / "contractsuite.log"
    recorder = config_flight_recorder(path, capacity=100)
    logger = logging.getLogger("contractsuite.tests.flight")
    logger.addHandler(recorder)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    try:
        with running_case("WidgetSuite::test_resize"):
            logger.debug("resolving Widget")
        assert not path.exists()
        logger.error("Errors during parsing NamedContract")
    finally:
        logger.removeHandler(recorder)
        recorder.close()
    text = path.read_text(encoding="utf-8")
    assert "contractsuite.tests.flight" in text
    assert "(WidgetSuite::test_resize): resolving Widget" in text
    assert "ERROR contractsuite.tests.flight" in text


def test_configure_logging_without_recorder(restore_root):
    setup = LoggingSetup(
        level=logging.INFO, logger_levels={"chatty.lib": logging.ERROR}
    )
    assert not setup.flight_recorder
    handlers = configure_logging(setup)
    assert [type(h) for h in handlers] == [RichHandler]
    assert logging.getLogger().handlers == handlers
    assert logging.getLogger("chatty.lib").level == logging.ERROR


def test_configure_logging_with_recorder(restore_root, tmp_path):
    """The log directory is created; the file waits for the first flush."""
    path = tmp_path / "logs" / "latest.log"
    handlers = configure_logging(LoggingSetup(log_path=path, flight_capacity=5))
    assert [type(h).__name__ for h in handlers] == ["RichHandler", "MemoryHandler"]
    assert handlers[1].capacity == 5  # type: ignore[attr-defined]
    assert path.parent.is_dir()
    assert not path.exists()


def test_log_startup_summary(caplog, tmp_path):
    """The one-line summary is INFO; diagnostics are DEBUG."""
    logger = logging.getLogger("contractsuite.tests.startup")
    setup = LoggingSetup(
        level=logging.WARNING,
        log_path=tmp_path / "x.log",
        flight_capacity=10,
        logger_levels={"urllib3": logging.ERROR},
    )
    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_startup(logger, setup, [logging.NullHandler()])
    info = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert len(info) == 1
    assert "console=WARNING, flight-recorder=ON" in info[0]
    assert "capacity=10" in caplog.text
    assert "Per-logger overrides: {'urllib3': 'ERROR'}" in caplog.text
    assert "Handlers: ['NullHandler']" in caplog.text


def test_log_startup_without_overrides(caplog):
    logger = logging.getLogger("contractsuite.tests.startup")
    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_startup(logger, LoggingSetup(), [])
    assert "flight-recorder=OFF" in caplog.text
    assert "Per-logger overrides: <none>" in caplog.text
