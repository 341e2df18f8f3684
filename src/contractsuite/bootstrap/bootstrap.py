"""Wire a discovery source, the declaration registry and the runner."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contractsuite import config
from contractsuite.adapters.discovery import PackageScanner
from contractsuite.adapters.runner import CaseResult, run_units
from contractsuite.service_layer.registry import DeclarationRegistry
from contractsuite.service_layer.reporting import ContractReport

if TYPE_CHECKING:
    from contractsuite.interfaces.discovery import DeclarationSource
    from contractsuite.service_layer.units import RunnableUnit


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring."""

    registry: DeclarationRegistry
    source: DeclarationSource
    packages: tuple[str, ...]
    runner: Callable[[Iterable[RunnableUnit]], list[CaseResult]] = run_units

    def report(self) -> ContractReport:
        """Build a coverage report over the scanned packages."""
        return ContractReport(self.registry, self.source, self.packages)


def build_registry(
    source: DeclarationSource, skip_names: Iterable[str] = ()
) -> DeclarationRegistry:
    """Populate a registry from one scan of `source`."""
    return DeclarationRegistry.populate(source.declaration_types(), skip_names)


def bootstrap(
    packages: Iterable[str] | None = None,
    skip_names: Iterable[str] | None = None,
    source: DeclarationSource | None = None,
) -> AppContainer:
    """Scan the configured packages and build the registry.

    Args:
        packages: Packages to scan; falls back to `CONTRACTSUITE_PACKAGES`.
        skip_names: Declaration names to leave out; falls back to
            `CONTRACTSUITE_SKIP_CLASSES`.
        source: Discovery source to use instead of a `PackageScanner`.

    Raises:
        NoPackagesConfiguredError: If no package is configured and no source
            is given.
    """
    if source is None:
        resolved = config.get_packages(packages)
        source = PackageScanner(resolved)
    else:
        resolved = config.parse_name_list(packages)
    skipped = (
        config.get_skip_classes()
        if skip_names is None
        else frozenset(config.parse_name_list(skip_names))
    )
    return AppContainer(
        registry=build_registry(source, skipped),
        source=source,
        packages=resolved,
    )
