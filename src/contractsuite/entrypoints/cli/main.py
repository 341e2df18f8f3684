"""contractsuite CLI entry point.

Defines the top-level ``contractsuite`` command (via Click-Extra) and registers
the subcommands exposed by the project.

Currently available commands
- ``contractsuite report``: write contract coverage reports for packages.
- ``contractsuite plan``: show the resolved test plan of implementation suites.
- ``contractsuite run``: run implementation suites with the in-process runner.

Notes
- The CLI version is sourced from `contractsuite.__version__` and displayed
  automatically by Click-Extra (``--version``).

Examples
    $ contractsuite --version
    $ contractsuite report mypkg --fail-on errors
    $ contractsuite run tests.test_widget:TestWidget
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from contractsuite import __version__
from contractsuite.logging import LoggingSetup, configure_logging, log_startup

from .helpers.log_level_parser import parse_log_level
from .report import report as report_command
from .suites import plan as plan_command
from .suites import run as run_command

logger = logging.getLogger(__name__)


HELP = """contractsuite command-line interface.

    Contract tests are written once per capability (an abstract class or
    protocol) and re-run against every implementation whose type satisfies
    that capability, directly or transitively.
    """


def _default_log_path() -> Path:
    return Path(user_log_dir("contractsuite", appauthor=False)) / "latest.log"


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path of the flight recorder log file.",
    default=_default_log_path,
    envvar="CONTRACTSUITE_LOG_PATH",
    show_default="<user log dir>/latest.log",
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="CONTRACTSUITE_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records at "
        "DEBUG granularity (unaffected by -v/-q) and writes them to --log-path "
        "when a WARNING/ERROR occurs, or on clean exit if --force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Force-flush the flight recorder buffer to --log-path on program exit. "
        "Normally the buffer only dumps on WARNING/ERROR."
    ),
    default=False,
    show_default=True,
    envvar="CONTRACTSUITE_FORCE_FLUSH_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,  # repeatable option
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight-recorder. Use to quiet chatty libraries used by the "
        "implementations under test. Repeatable (e.g. -L urllib3=WARNING)."
    ),
    envvar="CONTRACTSUITE_LOGGER_LEVELS",
    show_envvar=True,
)
@clickx.pass_context
def contractsuite(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """contractsuite command-line interface."""

    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    setup = LoggingSetup(
        level=max(logging.DEBUG, min(logging.CRITICAL, level)),
        debug=debug,
        color=ctx.color is not False,  # None or True => allow color
        log_path=log_path if flight_recorder else None,
        flight_capacity=flight_recorder_capacity,
        force_flush=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )
    log_startup(logger, setup, configure_logging(setup))

    ctx.call_on_close(logging.shutdown)  # runs after the command returns


contractsuite.add_command(report_command)
contractsuite.add_command(plan_command)
contractsuite.add_command(run_command)
