"""Dynamic suite support.

A dynamic suite lists its implementation suites at run time. Each listed
class is resolved independently: a failure in one never prevents the
resolution of its siblings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from contractsuite.domain.declarations import ImplementationDeclaration
from contractsuite.domain.errors import EmptyDynamicSuiteError, StructuralError
from contractsuite.domain.markers import is_contract_impl
from contractsuite.interfaces.dynamic import Dynamic

from .resolver import resolve

if TYPE_CHECKING:
    from contractsuite.domain.plan import TestPlan

    from .registry import DeclarationRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DynamicEntry:
    """The outcome for one class listed by a dynamic suite.

    Exactly one shape applies: a passthrough class (no declaration, plan or
    error), a resolved member (declaration and plan), or a failed member
    (error only).
    """

    member: type
    declaration: ImplementationDeclaration | None = None
    plan: TestPlan | None = None
    error: StructuralError | None = None

    @property
    def is_passthrough(self) -> bool:
        """True for ordinary test classes handed to the engine unchanged."""
        return self.plan is None and self.error is None


def resolve_dynamic_set(
    dynamic: ImplementationDeclaration, registry: DeclarationRegistry
) -> list[DynamicEntry]:
    """Resolve every class a dynamic suite supplies.

    Args:
        dynamic: The declaration of the dynamic suite.
        registry: The populated declaration registry.

    Returns:
        One entry per supplied class, in the order supplied.

    Raises:
        EmptyDynamicSuiteError: If the suite supplies no class at all.
    """
    members = list(cast(Dynamic, dynamic.instance).suite_classes() or ())
    if not members:
        raise EmptyDynamicSuiteError(dynamic.suite_type)

    entries: list[DynamicEntry] = []
    for member in members:
        if not is_contract_impl(member):
            logger.debug("Passing %s through unchanged", member)
            entries.append(DynamicEntry(member))
            continue
        try:
            declaration = ImplementationDeclaration.for_dynamic_member(member, dynamic)
            plan = resolve(declaration, registry)
        except StructuralError as e:
            logger.error("Unable to resolve %s in %s: %s", member, dynamic, e)
            entries.append(DynamicEntry(member, error=e))
            continue
        entries.append(DynamicEntry(member, declaration=declaration, plan=plan))
    return entries
