"""Test plan resolver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contractsuite.domain.capabilities import Capability, ordered_closure
from contractsuite.domain.errors import NoCapabilityDeclaredError, NoTestsFoundError
from contractsuite.domain.plan import TestPlan

if TYPE_CHECKING:
    from contractsuite.domain.declarations import (
        ContractDeclaration,
        ImplementationDeclaration,
    )

    from .registry import DeclarationRegistry

logger = logging.getLogger(__name__)


def resolve(
    implementation: ImplementationDeclaration, registry: DeclarationRegistry
) -> TestPlan:
    """Compute the test plan of one implementation.

    Capabilities of the implementation's target are visited in lexical order
    of their names, so resolving the same implementation against the same
    registry always yields the same plan. Declarations reached through more
    than one capability are kept once, at their first position.

    Args:
        implementation: The implementation to resolve.
        registry: The populated declaration registry.

    Returns:
        The plan, with malformed declarations kept in place so that they can
        surface as failing units.

    Raises:
        NoCapabilityDeclaredError: If the implementation names no target.
        NoTestsFoundError: If no contract suite, well-formed or not, applies
            and the implementation suite has no test of its own.
    """
    if implementation.target is None:
        raise NoCapabilityDeclaredError(implementation.suite_type)

    accumulated: dict[tuple[str, str], ContractDeclaration] = {}
    untested: list[Capability] = []
    skipped: list[Capability] = []

    for cap in ordered_closure(implementation.target):
        if implementation.skips(cap):
            logger.info("Skipping %s for %s", cap, implementation)
            skipped.append(cap)
            continue
        found = registry.by_capability(cap)
        if not found:
            logger.info("Checked %s found nothing", cap)
            untested.append(cap)
            continue
        for declaration in found:
            accumulated.setdefault(declaration.key, declaration)

    plan = TestPlan(
        implementation=implementation,
        entries=tuple(accumulated.values()),
        untested=tuple(untested),
        skipped=tuple(skipped),
        direct_tests=tuple(implementation.direct_test_names()),
    )
    if plan.is_empty:
        logger.error("No tests found for %s", implementation)
        raise NoTestsFoundError(implementation.suite_type, implementation.target)

    logger.debug(
        "Resolved %s: %d contract suite(s), %d malformed, %d direct test(s)",
        implementation,
        len(plan.declarations),
        len(plan.malformed),
        len(plan.direct_tests),
    )
    return plan
