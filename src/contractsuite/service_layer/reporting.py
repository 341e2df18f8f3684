"""Contract coverage reports.

`ContractReport` answers the questions a build wants to ask about a set of
scanned packages: which capabilities exist, which of them no contract test
covers, which contract tests no implementation exercises, which implementation
suites cannot run, and which declarations are malformed. The report performs
no I/O; writing the results out is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import cached_property
from typing import TYPE_CHECKING

from contractsuite.domain.capabilities import closure, is_capability
from contractsuite.domain.errors import StructuralError, qualified_name
from contractsuite.domain.markers import impl_spec, is_contract
from contractsuite.interfaces.dynamic import Dynamic

from .suite import build_suite
from .units import StructuralErrorUnit

if TYPE_CHECKING:
    from contractsuite.domain.errors import DeclarationError
    from contractsuite.interfaces.discovery import DeclarationSource

    from .registry import DeclarationRegistry

logger = logging.getLogger(__name__)


def _in_packages(tp: type, packages: tuple[str, ...]) -> bool:
    if not packages:
        return True
    module = tp.__module__
    return any(module == pkg or module.startswith(f"{pkg}.") for pkg in packages)


class ContractReport:
    """Coverage report over one registry and one discovery source.

    Args:
        registry: The populated declaration registry.
        source: The discovery collaborator the registry was built from.
        packages: Package prefixes defining the report scope. Only classes
            defined under them count as scanned; empty means everything the
            source yields.
    """

    def __init__(
        self,
        registry: DeclarationRegistry,
        source: DeclarationSource,
        packages: Iterable[str] = (),
    ) -> None:
        self.registry = registry
        self.source = source
        self.packages = tuple(packages)

    @cached_property
    def _declaration_types(self) -> list[type]:
        return [
            tp
            for tp in dict.fromkeys(self.source.declaration_types())
            if _in_packages(tp, self.packages)
        ]

    @cached_property
    def _implementation_types(self) -> list[type]:
        return [
            tp
            for tp in dict.fromkeys(self.source.implementation_types())
            if _in_packages(tp, self.packages)
        ]

    @cached_property
    def _scanned_capabilities(self) -> list[type]:
        candidates = dict.fromkeys(
            (*self._declaration_types, *self._implementation_types)
        )
        return [
            tp
            for tp in candidates
            if is_capability(tp) and not is_contract(tp) and impl_spec(tp) is None
        ]

    def interfaces(self) -> dict[str, list[str]]:
        """Map every known capability to the declarations registered for it.

        Known capabilities are those defined in the scanned packages plus
        those any registered declaration targets.

        Returns:
            Capability name -> declaration names, both sorted by name.
        """
        capabilities = dict.fromkeys(
            (*self._scanned_capabilities, *self.registry.capabilities())
        )
        result = {
            qualified_name(cap): sorted(
                decl.name for decl in self.registry.by_capability(cap)
            )
            for cap in capabilities
        }
        return dict(sorted(result.items()))

    def untested_capabilities(self) -> list[str]:
        """Return scanned capabilities no contract declaration validates."""
        return sorted(
            qualified_name(cap)
            for cap in self._scanned_capabilities
            if not self.registry.by_capability(cap)
        )

    def unimplemented_capabilities(self) -> list[str]:
        """Return tested capabilities with no concrete implementation in scope."""
        implemented: set[str] = set()
        for tp in self._implementation_types:
            if is_capability(tp):
                continue
            implemented.update(cap.name for cap in closure(tp))
        return sorted(
            name
            for name in map(qualified_name, self.registry.capabilities())
            if name not in implemented
        )

    def untestable_implementations(self) -> dict[str, StructuralError]:
        """Map each implementation suite that cannot run to its error.

        Every `@contract_impl` class in scope is resolved and assembled. For
        a dynamic suite, each listed member that fails is reported under the
        member's own name. Classes naming no target are only meaningful as
        members of a dynamic suite and are not resolved on their own.
        """
        failures: dict[str, StructuralError] = {}
        for suite_type in self._declaration_types:
            spec = impl_spec(suite_type)
            if spec is None:
                continue
            if spec.target is None and not issubclass(suite_type, Dynamic):
                continue
            try:
                units = build_suite(suite_type, self.registry)
            except StructuralError as e:
                logger.info("%s is untestable: %s", qualified_name(suite_type), e)
                failures[qualified_name(suite_type)] = e
                continue
            for unit in units:
                if isinstance(unit, StructuralErrorUnit) and isinstance(
                    unit.error, StructuralError
                ):
                    failures[unit.name] = unit.error
        return dict(sorted(failures.items()))

    def errors(self) -> list[DeclarationError]:
        """Return every recorded declaration error, in registration order."""
        return self.registry.errors()
