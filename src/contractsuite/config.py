"""Configuration utilities for CONTRACTSUITE.

This module centralizes the small helpers and constants related to
configuration: the environment variables read by the scan phase and the
per-report settings used by the ``report`` command.
"""

import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

SKIP_CLASSES_ENV = "CONTRACTSUITE_SKIP_CLASSES"  # pragma: no mutate
PACKAGES_ENV = "CONTRACTSUITE_PACKAGES"  # pragma: no mutate


class ConfigurationError(Exception):
    """Base class for configuration errors detected before any scanning."""


class NoPackagesConfiguredError(ConfigurationError):
    """Raised when no package was given to scan for declarations."""

    def __init__(self) -> None:
        super().__init__(
            "At least one package must be specified "
            f"(pass it explicitly or set {PACKAGES_ENV})."
        )


def split_names(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma/space separated value into its non-empty fragments.

    Accepts either a single string (``"a.B, c.D"``) or an iterable of such
    strings (as provided by repeatable options). Repeated fragments are kept.
    """
    if value is None:
        return []
    chunks = [value] if isinstance(value, str) else list(value)
    return [name for chunk in chunks for name in re.split(r"[,\s]+", chunk) if name]


def parse_name_list(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split a comma/space separated value into a tuple of distinct names.

    Args:
        value: The raw value, or None. See `split_names`.

    Returns:
        The distinct, non-empty names in order of first appearance.
    """
    return tuple(dict.fromkeys(split_names(value)))


def get_skip_classes(environ: Mapping[str, str] | None = None) -> frozenset[str]:
    """Get the declaration names to skip during registry population.

    Args:
        environ: Mapping to read from; defaults to `os.environ`.

    Returns:
        The fully-qualified class names listed in `CONTRACTSUITE_SKIP_CLASSES`
        (empty when unset).
    """
    environ = os.environ if environ is None else environ
    return frozenset(parse_name_list(environ.get(SKIP_CLASSES_ENV)))


def get_packages(
    packages: Iterable[str] | None = None, environ: Mapping[str, str] | None = None
) -> tuple[str, ...]:
    """Resolve the packages to scan.

    Explicit packages win; otherwise `CONTRACTSUITE_PACKAGES` is used.

    Args:
        packages: Packages given explicitly (e.g. on the command line).
        environ: Mapping to read from; defaults to `os.environ`.

    Returns:
        The package names to scan.

    Raises:
        NoPackagesConfiguredError: If neither source names any package.
    """
    if names := parse_name_list(packages):
        return names
    environ = os.environ if environ is None else environ
    if names := parse_name_list(environ.get(PACKAGES_ENV)):
        return names
    raise NoPackagesConfiguredError


@dataclass(frozen=True)
class ReportConfig:
    """Settings for one kind of report.

    Attributes:
        report: Write the report file when the report is non-empty.
        fail_on_error: Treat a non-empty report as a failure of the run.
    """

    report: bool = True
    fail_on_error: bool = False
