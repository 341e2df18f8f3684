"""Declaration registry.

The registry is the bidirectional index the resolver reads from:
capability -> contract declarations, and declaring type -> declaration. It is
populated once per resolution run and only read afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from contractsuite.domain.capabilities import Capability
from contractsuite.domain.declarations import ContractDeclaration
from contractsuite.domain.errors import DeclarationError, qualified_name
from contractsuite.domain.markers import is_contract

logger = logging.getLogger(__name__)


class DeclarationRegistry:
    """Index of contract declarations by capability and by declaring type.

    Identity lookups are last-writer-wins; capability lookups are additive and
    keep insertion order, so repeated runs iterate declarations identically.
    Registering the very same declaration object twice is a no-op for the
    capability index.
    """

    def __init__(self) -> None:
        self._by_type: dict[type, ContractDeclaration] = {}
        self._by_capability: dict[type, list[ContractDeclaration]] = {}

    @classmethod
    def populate(
        cls, candidates: Iterable[type], skip_names: Iterable[str] = ()
    ) -> DeclarationRegistry:
        """Build a registry from a one-time scan of candidate classes.

        Classes not decorated with `@contract` are ignored, and so are classes
        whose fully-qualified name is listed in `skip_names`. Malformed
        declarations are registered with their errors.

        Args:
            candidates: Classes supplied by the discovery collaborator.
            skip_names: Fully-qualified names of declarations to leave out.

        Returns:
            The populated registry.
        """
        skipped = frozenset(skip_names)
        registry = cls()
        for candidate in candidates:
            if not is_contract(candidate):
                continue
            name = qualified_name(candidate)
            if name in skipped:
                logger.info("Skipping contract %s (listed in skip classes)", name)
                continue
            logger.debug("Adding contract %s", name)
            registry.register(ContractDeclaration.from_type(candidate))
        logger.debug(
            "Registry populated: %d declaration(s) for %d capabilit(y/ies)",
            len(registry),
            len(registry.capabilities()),
        )
        return registry

    def register(self, declaration: ContractDeclaration) -> None:
        """Insert `declaration` into both indices."""
        previous = self._by_type.get(declaration.declaring_type)
        if previous is not None and previous is not declaration:
            logger.debug("Replacing %s in the declaring-type index", previous)
        self._by_type[declaration.declaring_type] = declaration

        bucket = self._by_capability.setdefault(declaration.capability, [])
        if not any(existing is declaration for existing in bucket):
            bucket.append(declaration)

    def by_capability(
        self, capability: Capability | type
    ) -> tuple[ContractDeclaration, ...]:
        """Return the declarations validating `capability` (empty if none)."""
        key = capability.cls if isinstance(capability, Capability) else capability
        return tuple(self._by_capability.get(key, ()))

    def by_declaring_type(self, declaring_type: type) -> ContractDeclaration | None:
        """Return the declaration registered for `declaring_type`, if any."""
        return self._by_type.get(declaring_type)

    def declarations(self) -> list[ContractDeclaration]:
        """Return every declaration reachable by declaring type."""
        return list(self._by_type.values())

    def capabilities(self) -> list[type]:
        """Return every capability with at least one declaration."""
        return list(self._by_capability)

    def errors(self) -> list[DeclarationError]:
        """Return the recorded errors of every declaration a plan can reach.

        The capability index is walked rather than the declaring-type index:
        a malformed declaration replaced by a later registration is still
        resolvable, so its errors are still reported. As in a plan, a repeated
        key counts once, for its first registration.
        """
        seen: set[tuple[str, str]] = set()
        errors: list[DeclarationError] = []
        for bucket in self._by_capability.values():
            for declaration in bucket:
                if declaration.key not in seen:
                    seen.add(declaration.key)
                    errors.extend(declaration.errors)
        return errors

    def __len__(self) -> int:
        return len(self._by_type)

    def __contains__(self, declaring_type: object) -> bool:
        return declaring_type in self._by_type

    def __iter__(self) -> Iterator[ContractDeclaration]:
        return iter(self._by_type.values())
