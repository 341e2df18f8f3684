"""Runnable units produced by the suite assembler.

A unit groups the test cases of one contract suite (or one synthetic failure)
for one implementation. Units know nothing about the engine that runs them:
each `UnitCase.run()` returns normally on success and raises on failure, so
the in-process runner and the pytest plugin can both drive them.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from contractsuite.domain.errors import (
    ContractSuiteError,
    DeclarationParseError,
    qualified_name,
)
from contractsuite.domain.markers import list_test_methods

if TYPE_CHECKING:
    from contractsuite.domain.declarations import (
        ContractDeclaration,
        ImplementationDeclaration,
    )

logger = logging.getLogger(__name__)

PARSE_ERRORS_CASE = "errors during parsing"  # pragma: no mutate
RESOLUTION_ERROR_CASE = "errors during resolution"  # pragma: no mutate


@dataclass(frozen=True)
class UnitCase:
    """One executable test case of a unit."""

    unit: str
    name: str
    func: Callable[[], None] = field(repr=False, compare=False)

    def run(self) -> None:
        """Execute the case; raise on failure."""
        self.func()


class RunnableUnit(abc.ABC):
    """An ordered group of test cases run together."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Display name of the unit, unique within one implementation."""

    @abc.abstractmethod
    def test_names(self) -> list[str]:
        """Names of the cases, in execution order."""

    @abc.abstractmethod
    def run_case(self, test_name: str) -> None:
        """Run one case by name; raise on failure."""

    def cases(self) -> list[UnitCase]:
        """Return the unit's cases, in execution order."""
        return [
            UnitCase(self.name, test_name, partial(self.run_case, test_name))
            for test_name in self.test_names()
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def run_xunit_method(instance: object, test_name: str) -> None:
    """Run one test method with pytest's xunit-style method hooks.

    ``setup_method(method)`` runs first if defined; ``teardown_method(method)``
    runs after the test, whatever its outcome, provided setup succeeded.
    """
    method = getattr(instance, test_name)
    if (setup := getattr(instance, "setup_method", None)) is not None:
        setup(method)
    try:
        method()
    finally:
        if (teardown := getattr(instance, "teardown_method", None)) is not None:
            teardown(method)


class ContractUnit(RunnableUnit):
    """The test methods of one contract suite bound to one implementation.

    Every case gets its own producer from the implementation's accessor and
    its own instance of the contract class; `clean_up()` always runs after
    the case.
    """

    def __init__(
        self,
        declaration: ContractDeclaration,
        implementation: ImplementationDeclaration,
    ) -> None:
        self.declaration = declaration
        self.implementation = implementation

    @property
    def name(self) -> str:
        return self.declaration.name

    def test_names(self) -> list[str]:
        return self.declaration.test_names()

    def run_case(self, test_name: str) -> None:
        logger.debug("Running %s.%s for %s", self.name, test_name, self.implementation)
        producer = self.implementation.producer()
        try:
            test = self.declaration.declaring_type()
            getattr(test, self.declaration.inject_method)(producer)
            run_xunit_method(test, test_name)
        finally:
            producer.clean_up()


class ErrorUnit(RunnableUnit):
    """A synthetic unit reporting the recorded errors of a malformed contract."""

    def __init__(self, declaration: ContractDeclaration) -> None:
        self.declaration = declaration

    @property
    def name(self) -> str:
        return self.declaration.name

    def test_names(self) -> list[str]:
        return [PARSE_ERRORS_CASE]

    def run_case(self, test_name: str) -> None:
        raise DeclarationParseError(
            self.declaration.declaring_type, self.declaration.errors
        )


class ClassTestsUnit(RunnableUnit):
    """Test methods of a plain test class, each run on a fresh instance."""

    def __init__(self, cls: type, test_names: list[str] | None = None) -> None:
        self.cls = cls
        self._test_names = (
            list(test_names) if test_names is not None else list_test_methods(cls)
        )

    @property
    def name(self) -> str:
        return qualified_name(self.cls)

    def test_names(self) -> list[str]:
        return list(self._test_names)

    def run_case(self, test_name: str) -> None:
        run_xunit_method(self.cls(), test_name)


class DirectTestsUnit(ClassTestsUnit):
    """The implementation suite's own tests, without those inherited from contracts."""

    def __init__(self, implementation: ImplementationDeclaration) -> None:
        super().__init__(
            implementation.suite_type, implementation.direct_test_names()
        )
        self.implementation = implementation

    @property
    def name(self) -> str:
        return self.cls.__qualname__


class PassthroughUnit(ClassTestsUnit):
    """An ordinary test class listed by a dynamic suite, run unchanged."""


class StructuralErrorUnit(RunnableUnit):
    """A synthetic unit for a dynamic member that could not be resolved."""

    def __init__(self, member: type, error: ContractSuiteError) -> None:
        self.member = member
        self.error = error

    @property
    def name(self) -> str:
        return qualified_name(self.member)

    def test_names(self) -> list[str]:
        return [RESOLUTION_ERROR_CASE]

    def run_case(self, test_name: str) -> None:
        raise self.error
