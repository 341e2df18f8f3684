"""The resolved test plan of one implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .capabilities import Capability
    from .declarations import ContractDeclaration, ImplementationDeclaration


@dataclass(frozen=True)
class TestPlan:
    """Ordered, duplicate-free contract suites applicable to one implementation.

    Attributes:
        implementation: The implementation the plan was resolved for.
        entries: Every applicable declaration, well-formed or not, in
            resolution order.
        untested: Capabilities of the implementation with no registered
            declaration. Reported, never enforced.
        skipped: Capabilities excluded by the implementation's skip list.
        direct_tests: The implementation suite's own test methods.
    """

    __test__ = False  # not a pytest test class

    implementation: ImplementationDeclaration
    entries: tuple[ContractDeclaration, ...] = ()
    untested: tuple[Capability, ...] = ()
    skipped: tuple[Capability, ...] = ()
    direct_tests: tuple[str, ...] = ()

    @property
    def declarations(self) -> tuple[ContractDeclaration, ...]:
        """The well-formed declarations, in resolution order."""
        return tuple(entry for entry in self.entries if entry.is_valid)

    @property
    def malformed(self) -> tuple[ContractDeclaration, ...]:
        """The declarations carrying recorded errors, in resolution order."""
        return tuple(entry for entry in self.entries if not entry.is_valid)

    @property
    def is_empty(self) -> bool:
        """True when no unit at all would be assembled.

        A malformed declaration still counts: it becomes a failing error unit.
        """
        return not self.entries and not self.direct_tests
