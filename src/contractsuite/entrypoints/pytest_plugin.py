"""pytest plugin running contract suites.

Enable it from a ``conftest.py``::

    pytest_plugins = ["contractsuite.entrypoints.pytest_plugin"]

Every class decorated with `@contract_impl` in a test module, and named like a
test class (``python_classes``), is collected as a suite whose children are
the assembled units (one pytest item per case).
Classes decorated with `@contract` are never collected on their own; they only
run through the implementations that satisfy their capability.

Contract suites are scanned once per session from the packages given by the
``contract_packages`` ini option or ``--contract-package``, falling back to
CONTRACTSUITE_PACKAGES and then to the top-level package of the module being
collected. A structural error in one implementation suite becomes a collection
error for that suite only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest

from contractsuite.bootstrap import bootstrap
from contractsuite.config import ConfigurationError, get_packages
from contractsuite.domain.errors import ContractSuiteError
from contractsuite.domain.markers import is_contract, is_contract_impl
from contractsuite.logging import running_case
from contractsuite.service_layer.suite import build_suite

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from contractsuite.service_layer.registry import DeclarationRegistry
    from contractsuite.service_layer.units import RunnableUnit, UnitCase

logger = logging.getLogger(__name__)

_registries_key = pytest.StashKey[dict[tuple[str, ...], "DeclarationRegistry"]]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("contractsuite")
    group.addoption(
        "--contract-package",
        action="append",
        dest="contract_packages",
        default=[],
        metavar="PACKAGE",
        help="Package to scan for contract suites (repeatable).",
    )
    parser.addini(
        "contract_packages",
        type="linelist",
        default=[],
        help="Packages scanned for contract suites.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.stash[_registries_key] = {}
    config.addinivalue_line(
        "markers", "contract_suite: items generated from a contract suite"
    )


def _packages(config: pytest.Config, module_name: str) -> tuple[str, ...]:
    configured = [
        *config.getoption("contract_packages"),
        *config.getini("contract_packages"),
    ]
    try:
        return get_packages(configured)
    except ConfigurationError:
        return (module_name.split(".")[0],)


def get_registry(config: pytest.Config, module_name: str) -> DeclarationRegistry:
    """Return the session registry for the packages relevant to `module_name`."""
    packages = _packages(config, module_name)
    registries = config.stash[_registries_key]
    if packages not in registries:
        logger.debug("Scanning %s for contract suites", ", ".join(packages))
        registries[packages] = bootstrap(packages).registry
    return registries[packages]


@pytest.hookimpl(tryfirst=True)
def pytest_pycollect_makeitem(
    collector: pytest.Module | pytest.Class, name: str, obj: object
) -> Any:
    if not isinstance(obj, type):
        return None
    if is_contract(obj):
        return []
    if is_contract_impl(obj):
        # same naming rules as plain test classes (``python_classes``, __test__)
        if not collector.classnamefilter(name) or not getattr(obj, "__test__", True):
            return None
        return ContractSuiteCollector.from_parent(collector, name=name, obj=obj)
    return None


class ContractSuiteCollector(pytest.Collector):
    """Collector for one implementation suite."""

    def __init__(self, *, obj: type, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.obj = obj

    def collect(self) -> Iterator[UnitCollector]:
        registry = get_registry(self.config, self.obj.__module__)
        try:
            units = build_suite(self.obj, registry)
        except ContractSuiteError as e:
            raise self.CollectError(str(e)) from e
        # a dynamic suite may run the same contract for several members
        seen: dict[str, int] = {}
        for unit in units:
            count = seen[unit.name] = seen.get(unit.name, 0) + 1
            name = unit.name if count == 1 else f"{unit.name}[{count}]"
            yield UnitCollector.from_parent(self, name=name, unit=unit)

    def reportinfo(self) -> tuple[Path, int | None, str]:
        return self.path, None, self.obj.__qualname__


class UnitCollector(pytest.Collector):
    """Collector for one runnable unit."""

    def __init__(self, *, unit: RunnableUnit, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.unit = unit

    def collect(self) -> Iterator[ContractCaseItem]:
        for case in self.unit.cases():
            item = ContractCaseItem.from_parent(self, name=case.name, case=case)
            item.add_marker("contract_suite")
            yield item


class ContractCaseItem(pytest.Item):
    """One case of a unit."""

    def __init__(self, *, case: UnitCase, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.case = case

    def runtest(self) -> None:
        with running_case(f"{self.case.unit}::{self.case.name}"):
            self.case.run()

    def reportinfo(self) -> tuple[Path, int | None, str]:
        return self.path, None, f"{self.case.unit}::{self.case.name}"
