"""``contractsuite report``: write contract coverage reports.

Scans the given packages once and writes up to four plain-text reports into
the report directory:

- ``interfaces.txt``: every capability with the contract suites testing it,
  followed by every scanned class carrying a marker.
- ``untested.txt``: capabilities no contract suite validates.
- ``unimplemented.txt``: capabilities with contract suites but no concrete
  implementation in the scanned packages.
- ``errors.txt``: malformed contract declarations and implementation suites
  that cannot run.

Each report is written only when non-empty and enabled. ``--fail-on`` turns a
non-empty report into a failing exit status, after every report is written.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import click

from contractsuite.bootstrap import bootstrap
from contractsuite.config import ConfigurationError, ReportConfig, parse_name_list
from contractsuite.domain.markers import is_contract, is_contract_impl

from .helpers import error, hyperlink, success, warn

if TYPE_CHECKING:
    from contractsuite.service_layer.reporting import ContractReport

logger = logging.getLogger(__name__)

REPORT_KINDS = ("untested", "unimplemented", "errors", "untestable")  # pragma: no mutate

FAILURE_MESSAGES = {
    "untested": "Untested capabilities exist",
    "unimplemented": "Unimplemented contract tests exist",
    "errors": "Contract test errors exist",
    "untestable": "Untestable implementation suites exist",
}


def _write(path: Path, lines: Iterable[str]) -> None:
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    logger.debug("Wrote %s", path)


def _interface_lines(report: ContractReport) -> list[str]:
    lines = [
        f"Interface: {name} {tests}" for name, tests in report.interfaces().items()
    ]
    for cls in report.source.declaration_types():
        contract, impl = is_contract(cls), is_contract_impl(cls)
        if contract or impl:
            lines.append(
                f"Class: {cls.__module__}.{cls.__qualname__}, "
                f"contract: {contract}, impl: {impl}"
            )
    return lines


def _emit(
    kind: str,
    filename: str,
    lines: list[str],
    cfg: ReportConfig,
    report_dir: Path,
) -> bool:
    """Write one report; return False when it must fail the run."""
    if not lines:
        return True
    warn(f"{kind}: {len(lines)} entr{'y' if len(lines) == 1 else 'ies'}")
    if cfg.report:
        path = report_dir / filename
        _write(path, lines)
        click.echo(f"  -> {hyperlink(path)}", err=True)
    return not cfg.fail_on_error


@click.command()
@click.argument("packages", nargs=-1)
@click.option(
    "--report-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("contract-reports"),
    show_default=True,
    help="Directory the report files are written to (created if missing).",
)
@click.option(
    "--skip-classes",
    "skip_classes",
    multiple=True,
    envvar="CONTRACTSUITE_SKIP_CLASSES",
    show_envvar=True,
    help=(
        "Fully-qualified contract suite names to leave out of the registry. "
        "Repeatable or comma separated."
    ),
)
@click.option(
    "--untested/--no-untested",
    "report_untested",
    default=True,
    show_default=True,
    help="Write untested.txt.",
)
@click.option(
    "--unimplemented/--no-unimplemented",
    "report_unimplemented",
    default=True,
    show_default=True,
    help="Write unimplemented.txt.",
)
@click.option(
    "--errors/--no-errors",
    "report_errors",
    default=True,
    show_default=True,
    help="Write errors.txt.",
)
@click.option(
    "--fail-on",
    "fail_on",
    multiple=True,
    type=click.Choice(REPORT_KINDS, case_sensitive=False),
    help="Exit with an error when this report is non-empty. Repeatable.",
)
def report(  # pylint: disable=too-many-arguments, too-many-positional-arguments, too-many-locals
    packages: tuple[str, ...],
    report_dir: Path,
    skip_classes: tuple[str, ...],
    report_untested: bool,
    report_unimplemented: bool,
    report_errors: bool,
    fail_on: tuple[str, ...],
) -> None:
    """Scan PACKAGES and write contract coverage reports.

    PACKAGES defaults to the CONTRACTSUITE_PACKAGES environment variable.
    """
    try:
        container = bootstrap(packages, parse_name_list(skip_classes) or None)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    fail = {kind.lower() for kind in fail_on}
    report_dir.mkdir(parents=True, exist_ok=True)
    contract_report = container.report()

    _write(report_dir / "interfaces.txt", _interface_lines(contract_report))

    untestable = contract_report.untestable_implementations()
    untestable_lines = [f"{name}: {err}" for name, err in untestable.items()]
    error_lines = [str(err) for err in contract_report.errors()] + untestable_lines

    failures: list[str] = []
    outcomes = [
        (
            "untested",
            _emit(
                "Untested capabilities",
                "untested.txt",
                contract_report.untested_capabilities(),
                ReportConfig(report_untested, "untested" in fail),
                report_dir,
            ),
        ),
        (
            "unimplemented",
            _emit(
                "Unimplemented contract tests",
                "unimplemented.txt",
                contract_report.unimplemented_capabilities(),
                ReportConfig(report_unimplemented, "unimplemented" in fail),
                report_dir,
            ),
        ),
        (
            "errors",
            _emit(
                "Contract test errors",
                "errors.txt",
                error_lines,
                ReportConfig(report_errors, "errors" in fail),
                report_dir,
            ),
        ),
        ("untestable", not (untestable and "untestable" in fail)),
    ]
    for kind, ok in outcomes:
        if not ok:
            error(FAILURE_MESSAGES[kind])
            failures.append(FAILURE_MESSAGES[kind])

    if failures:
        raise click.ClickException("; ".join(failures))
    success(f"Reports written to {hyperlink(report_dir)}")
