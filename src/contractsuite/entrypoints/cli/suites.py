"""``contractsuite plan`` and ``contractsuite run``.

Both commands take implementation suites as ``MODULE:CLASS`` references.
Contract declarations are scanned from ``--package`` (repeatable), then
CONTRACTSUITE_PACKAGES, then the top-level packages defining the suites.
Plans and results go to stdout; notices go to stderr.
"""

from __future__ import annotations

import logging

import click

from contractsuite.bootstrap import AppContainer, Outcome, bootstrap, summarize
from contractsuite.config import ConfigurationError, get_packages, parse_name_list
from contractsuite.domain.declarations import ImplementationDeclaration
from contractsuite.domain.errors import StructuralError
from contractsuite.domain.plan import TestPlan
from contractsuite.service_layer.dynamic import resolve_dynamic_set
from contractsuite.service_layer.resolver import resolve
from contractsuite.service_layer.suite import build_suite

from .helpers import default_packages, error, parse_suite_refs, success, warn

logger = logging.getLogger(__name__)

OUTCOME_COLORS = {
    Outcome.PASSED: "green",
    Outcome.FAILED: "red",
    Outcome.ERROR: "red",
}


def _container(
    suites: list[type], packages: tuple[str, ...], skip_classes: tuple[str, ...]
) -> AppContainer:
    try:
        resolved = get_packages(packages)
    except ConfigurationError:
        resolved = tuple(default_packages(suites))
        logger.info("No package configured; scanning %s", ", ".join(resolved))
    try:
        return bootstrap(resolved, parse_name_list(skip_classes) or None)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def _echo_plan(plan: TestPlan, indent: str = "") -> None:
    click.echo(f"{indent}{plan.implementation}")
    if plan.direct_tests:
        click.echo(f"{indent}  direct: {', '.join(plan.direct_tests)}")
    for declaration in plan.entries:
        label = "contract" if declaration.is_valid else "malformed"
        click.echo(f"{indent}  {label}: {declaration.name}")
        for err in declaration.errors:
            click.echo(f"{indent}    ! {err}")
    for cap in plan.skipped:
        click.echo(f"{indent}  skipped: {cap}")
    for cap in plan.untested:
        click.echo(f"{indent}  untested: {cap}")


_SUITE_ARGUMENT = click.argument(
    "suites", nargs=-1, required=True, callback=parse_suite_refs
)
_PACKAGE_OPTION = click.option(
    "--package",
    "-p",
    "packages",
    multiple=True,
    help="Package to scan for contract suites. Repeatable.",
)
_SKIP_OPTION = click.option(
    "--skip-classes",
    "skip_classes",
    multiple=True,
    envvar="CONTRACTSUITE_SKIP_CLASSES",
    show_envvar=True,
    help="Fully-qualified contract suite names to leave out. Repeatable.",
)


@click.command()
@_SUITE_ARGUMENT
@_PACKAGE_OPTION
@_SKIP_OPTION
def plan(
    suites: list[type], packages: tuple[str, ...], skip_classes: tuple[str, ...]
) -> None:
    """Show the resolved test plan of each implementation suite in SUITES."""
    container = _container(suites, packages, skip_classes)
    failed = False
    for suite_type in suites:
        try:
            implementation = ImplementationDeclaration.from_type(suite_type)
            if not implementation.is_dynamic:
                _echo_plan(resolve(implementation, container.registry))
                continue
            click.echo(str(implementation))
            for entry in resolve_dynamic_set(implementation, container.registry):
                if entry.plan is not None:
                    _echo_plan(entry.plan, indent="  ")
                elif entry.error is not None:
                    click.echo(f"  {entry.member.__qualname__}: ! {entry.error}")
                else:
                    click.echo(f"  {entry.member.__qualname__}: passthrough")
        except StructuralError as e:
            error(str(e))
            failed = True
    if failed:
        raise click.ClickException("At least one suite could not be resolved")


@click.command()
@_SUITE_ARGUMENT
@_PACKAGE_OPTION
@_SKIP_OPTION
def run(
    suites: list[type], packages: tuple[str, ...], skip_classes: tuple[str, ...]
) -> None:
    """Run the contract tests of each implementation suite in SUITES."""
    container = _container(suites, packages, skip_classes)
    results = []
    unresolved = 0
    for suite_type in suites:
        try:
            units = build_suite(suite_type, container.registry)
        except StructuralError as e:
            error(str(e))
            unresolved += 1
            continue
        for result in container.runner(units):
            results.append(result)
            click.secho(
                f"{result.outcome.value.upper():7} {result.nodeid}",
                fg=OUTCOME_COLORS[result.outcome],
            )
            if not result.passed:
                click.echo(result.format_error(), err=True)

    counts = summarize(results)
    # a suite that cannot be resolved counts as one error
    counts[Outcome.ERROR] += unresolved
    summary = ", ".join(f"{n} {outcome.value}" for outcome, n in counts.items())
    if counts[Outcome.FAILED] or counts[Outcome.ERROR]:
        warn(summary)
        raise click.exceptions.Exit(1)
    success(summary)
