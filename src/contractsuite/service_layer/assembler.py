"""Suite assembler: turns a test plan into runnable units."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contractsuite.domain.errors import MissingProducerError

from .units import ContractUnit, DirectTestsUnit, ErrorUnit, RunnableUnit

if TYPE_CHECKING:
    from contractsuite.domain.declarations import ImplementationDeclaration
    from contractsuite.domain.plan import TestPlan

logger = logging.getLogger(__name__)


def assemble(
    implementation: ImplementationDeclaration, plan: TestPlan
) -> list[RunnableUnit]:
    """Materialize the runnable units of one implementation.

    The implementation suite's own tests come first (when it has any), then
    one unit per plan entry in plan order: a `ContractUnit` for a well-formed
    declaration, an `ErrorUnit` for a malformed one. Malformed declarations
    never abort assembly; their errors are logged here and reported when the
    error unit runs.

    Args:
        implementation: The implementation the plan was resolved for.
        plan: Its resolved test plan.

    Returns:
        The units, in execution order.

    Raises:
        MissingProducerError: If well-formed contract suites apply but the
            implementation declares no producer accessor.
    """
    if plan.declarations and implementation.producer_method is None:
        raise MissingProducerError(implementation.suite_type)

    units: list[RunnableUnit] = []
    if plan.direct_tests:
        units.append(DirectTestsUnit(implementation))

    for declaration in plan.entries:
        if declaration.is_valid:
            units.append(ContractUnit(declaration, implementation))
            continue
        logger.error("Errors during parsing %s", declaration)
        for error in declaration.errors:
            logger.error("  %s", error)
        units.append(ErrorUnit(declaration))

    logger.debug("Assembled %d unit(s) for %s", len(units), implementation)
    return units
