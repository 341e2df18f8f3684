"""Logging helpers used by the contractsuite CLI and engines.

Contract tests run user code, so most of what is logged during a run comes
from the implementations under test rather than from contractsuite itself.
This module tags those records: `CaseContextFilter` prefixes every record
from outside the project with its top-level package and, while a case is
running (see `running_case`), with the ``unit::case`` id of that case.

`configure_logging` wires a Rich console handler and an optional in-memory
"flight recorder" that keeps the full DEBUG trace of the run and writes it to
disk when something goes wrong.
"""

from __future__ import annotations

import contextlib
import logging
import os
import platform
import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.metadata import version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

from contractsuite import __version__

if TYPE_CHECKING:
    from collections.abc import Iterator

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "contractsuite"

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_FORMAT = "%(asctime)s %(name)s%(case)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s "
    "%(name)s:%(lineno)d%(case)s: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]

_current_case: ContextVar[str | None] = ContextVar("contractsuite_case", default=None)


@contextlib.contextmanager
def running_case(nodeid: str) -> Iterator[None]:
    """Mark `nodeid` as the case being run for the duration of the block."""
    token = _current_case.set(nodeid)
    try:
        yield
    finally:
        _current_case.reset(token)


def current_case() -> str | None:
    return _current_case.get()


class CaseContextFilter(logging.Filter):
    """Attach ``prefix`` and ``case`` attributes used by the formatters.

    - ``record.case`` is `` (unit::case)`` while a case runs, else empty.
    - ``record.prefix`` is empty for contractsuite's own loggers. For any
      other logger it is the bracketed top-level package, followed by the
      running case if there is one, e.g. ``[shapes @ NamedContract::test_x]``.

    Records are never dropped.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        nodeid = current_case()
        record.case = f" ({nodeid})" if nodeid else ""
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            origin = record.name.split(".")[0]
            record.prefix = f"[{origin} @ {nodeid}]" if nodeid else f"[{origin}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler writing to stderr.

    Plans, results and report paths go to stdout, so log output must not.
    Debug mode forces DEBUG and shows timestamps, logger names and source
    locations instead of the short prefix.
    """
    # None mirrors click-extra's --no-color
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    handler.setFormatter(
        logging.Formatter(fmt=DEBUG_FORMAT if debug_mode else CONSOLE_FORMAT)
    )
    handler.addFilter(CaseContextFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Return an in-memory flight recorder backed by a file.

    Up to `capacity` records are buffered and written to `path` when a record
    at `flush_level` or higher arrives (or on close if `flush_on_close`).
    Malformed contract declarations are logged at ERROR during assembly, so a
    run that meets one leaves its full resolution trace on disk. The file is
    only created on the first flush.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(RECORDER_FORMAT))

    recorder = MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )
    # the case is only known at emit time, not when the buffer is flushed
    recorder.addFilter(CaseContextFilter())
    return recorder


@dataclass(frozen=True)
class LoggingSetup:
    """Everything the CLI options decide about logging."""

    level: int = logging.WARNING
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @property
    def flight_recorder(self) -> bool:
        return self.log_path is not None


def configure_logging(setup: LoggingSetup) -> list[logging.Handler]:
    """Install the console handler and flight recorder on the root logger.

    Returns:
        The installed handlers.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(setup.level, setup.debug, setup.color)
    ]
    if setup.log_path is not None:
        setup.log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            config_flight_recorder(
                path=setup.log_path,
                capacity=setup.flight_capacity,
                flush_on_close=setup.force_flush,
            )
        )

    # the root captures everything; each handler applies its own level
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in setup.logger_levels.items():
        logging.getLogger(name).setLevel(lvl)
    return handlers


def log_startup(
    logger: logging.Logger, setup: LoggingSetup, handlers: list[logging.Handler]
) -> None:
    """Log a one-line INFO summary, then DEBUG diagnostics for bug reports."""
    logger.info(
        "CONTRACTSUITE %s: console=%s, flight-recorder=%s",
        __version__,
        logging.getLevelName(setup.level),
        "ON" if setup.flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("Click: %s", version("click"))
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if setup.flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            setup.log_path,
            setup.flight_capacity,
            setup.force_flush,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in setup.logger_levels.items()}
        or "<none>",
    )
