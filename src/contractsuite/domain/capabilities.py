"""Capability graph accessor.

A capability is a behavioural contract a class can satisfy: an abstract
class, a `typing.Protocol`, or any class explicitly decorated with
`@capability`. Capability records are built from the static class hierarchy
only; virtual subclasses registered with `ABCMeta.register` are not followed.
"""

from __future__ import annotations

import abc
import inspect
import typing
from dataclasses import dataclass, field
from functools import cache

from .errors import qualified_name
from .markers import is_marked_capability

NEVER_CAPABILITIES: frozenset[type] = frozenset(
    {object, abc.ABC, typing.Protocol, typing.Generic}  # type: ignore[arg-type]
)


@dataclass(frozen=True, order=True)
class Capability:
    """An immutable node of the capability graph.

    Equality, hashing and ordering use `name` only.

    Attributes:
        name: Fully-qualified ``module.qualname`` of the class.
        cls: The class object.
        parents: The nearest capabilities this one extends, reached through
            any number of non-capability superclasses.
    """

    name: str
    cls: type = field(compare=False, repr=False)
    parents: tuple[Capability, ...] = field(default=(), compare=False, repr=False)

    def __str__(self) -> str:
        return self.name


def is_capability(tp: type) -> bool:
    """Return True if `tp` counts as a capability."""
    if tp in NEVER_CAPABILITIES:
        return False
    if is_marked_capability(tp) or vars(tp).get("_is_protocol", False):
        return True
    return inspect.isabstract(tp)


@cache
def capability_of(tp: type) -> Capability:
    """Return the (cached) capability record of `tp`.

    The record is built whether or not `tp` is itself a capability, so that
    the parents of a concrete class can be read from it.

    Raises:
        TypeError: If `tp` is not a class.
    """
    if not isinstance(tp, type):
        raise TypeError(f"expected a class, got {tp!r}")
    return Capability(name=qualified_name(tp), cls=tp, parents=_parents(tp))


def _parents(tp: type) -> tuple[Capability, ...]:
    found: dict[str, Capability] = {}
    for base in tp.__bases__:
        candidates = (capability_of(base),) if is_capability(base) else _parents(base)
        for cap in candidates:
            found.setdefault(cap.name, cap)
    return tuple(found.values())


def closure(tp: type) -> frozenset[Capability]:
    """Compute every capability `tp` satisfies, directly or transitively.

    Follows both capability-extends-capability and class-inheritance edges.
    `tp` itself is part of the result only when it is a capability (a
    reflexive query on an interface).

    Args:
        tp: The class to inspect.

    Returns:
        The capabilities reachable from `tp`, deduplicated by name.

    Raises:
        TypeError: If `tp` is None or not a class.
    """
    if not isinstance(tp, type):
        raise TypeError(f"closure() expects a class, got {tp!r}")
    root = capability_of(tp)
    pending = [root] if is_capability(tp) else list(root.parents)
    seen: dict[str, Capability] = {}
    while pending:
        cap = pending.pop()
        if cap.name in seen:
            continue
        seen[cap.name] = cap
        pending.extend(cap.parents)
    return frozenset(seen.values())


def ordered_closure(tp: type) -> list[Capability]:
    """Return `closure(tp)` sorted by capability name."""
    return sorted(closure(tp), key=lambda cap: cap.name)
