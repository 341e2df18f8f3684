"""Build the runnable units of one implementation suite class.

This is the single entry point execution engines call: it instantiates the
suite, dispatches to the static or dynamic resolution path, and assembles
the result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contractsuite.domain.declarations import ImplementationDeclaration
from contractsuite.domain.errors import StructuralError

from .assembler import assemble
from .dynamic import resolve_dynamic_set
from .resolver import resolve
from .units import PassthroughUnit, RunnableUnit, StructuralErrorUnit

if TYPE_CHECKING:
    from .registry import DeclarationRegistry

logger = logging.getLogger(__name__)


def build_suite(suite_type: type, registry: DeclarationRegistry) -> list[RunnableUnit]:
    """Resolve and assemble the units of `suite_type`.

    Args:
        suite_type: A class decorated with `@contract_impl`.
        registry: The populated declaration registry.

    Returns:
        The units to run, in order. For a dynamic suite, the units of each
        listed class stay together and keep the listed order.

    Raises:
        StructuralError: If the suite as a whole cannot be resolved. Failures
            of individual dynamic members become `StructuralErrorUnit`s
            instead.
    """
    implementation = ImplementationDeclaration.from_type(suite_type)
    if not implementation.is_dynamic:
        return assemble(implementation, resolve(implementation, registry))

    units: list[RunnableUnit] = []
    for entry in resolve_dynamic_set(implementation, registry):
        if entry.error is not None:
            units.append(StructuralErrorUnit(entry.member, entry.error))
        elif entry.declaration is None or entry.plan is None:
            units.append(PassthroughUnit(entry.member))
        else:
            try:
                units.extend(assemble(entry.declaration, entry.plan))
            except StructuralError as e:
                logger.error("Unable to assemble %s: %s", entry.member, e)
                units.append(StructuralErrorUnit(entry.member, e))
    return units
