"""Unit tests for application wiring."""

from __future__ import annotations

import pytest

from contractsuite.adapters.discovery import InMemorySource, PackageScanner
from contractsuite.adapters.runner import run_units
from contractsuite.bootstrap import AppContainer, bootstrap, build_registry
from contractsuite.config import (
    PACKAGES_ENV,
    SKIP_CLASSES_ENV,
    NoPackagesConfiguredError,
)
from contractsuite.service_layer.reporting import ContractReport
from tests.fixtures.registries import SAMPLE
from tests.fixtures.sample import contracts

NAMED = "tests.fixtures.sample.contracts.NamedContract"  # pragma: no mutate


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(PACKAGES_ENV, raising=False)
    monkeypatch.delenv(SKIP_CLASSES_ENV, raising=False)


def test_bootstrap_scans_the_given_packages():
    """Explicit packages are scanned with a PackageScanner."""
    container = bootstrap([SAMPLE])
    assert isinstance(container, AppContainer)
    assert isinstance(container.source, PackageScanner)
    assert container.packages == (SAMPLE,)
    assert contracts.NamedContract in container.registry
    assert container.runner is run_units


def test_bootstrap_reads_packages_from_the_environment(monkeypatch):
    """CONTRACTSUITE_PACKAGES is the fallback."""
    monkeypatch.setenv(PACKAGES_ENV, SAMPLE)
    assert bootstrap().packages == (SAMPLE,)


def test_bootstrap_without_packages_fails():
    """Nothing to scan is a configuration error."""
    with pytest.raises(NoPackagesConfiguredError):
        bootstrap()


def test_skip_names_leave_declarations_out(monkeypatch):
    """Explicit skip names win over CONTRACTSUITE_SKIP_CLASSES."""
    aged = "tests.fixtures.sample.contracts.AgedContract"
    monkeypatch.setenv(SKIP_CLASSES_ENV, aged)
    from_env = bootstrap([SAMPLE]).registry
    explicit = bootstrap([SAMPLE], [NAMED]).registry
    assert contracts.AgedContract not in from_env
    assert contracts.NamedContract in from_env
    assert contracts.NamedContract not in explicit
    assert contracts.AgedContract in explicit


def test_bootstrap_with_a_custom_source():
    """A given source is used as is; packages only scope reports."""
    source = InMemorySource([contracts.NamedContract])
    container = bootstrap(source=source)
    assert container.source is source
    assert container.packages == ()
    assert len(container.registry) == 1


def test_build_registry_and_report():
    """The container builds reports over its own registry and scope."""
    source = InMemorySource([contracts.NamedContract, contracts.ColoredContract])
    registry = build_registry(source, skip_names=[NAMED])
    assert [decl.name for decl in registry] == [
        "tests.fixtures.sample.contracts.ColoredContract"
    ]
    report = AppContainer(registry, source, (SAMPLE,)).report()
    assert isinstance(report, ContractReport)
    assert report.packages == (SAMPLE,)
