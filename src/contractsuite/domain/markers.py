"""Declaration markers.

The decorators in this module are how users declare the pieces the resolver
works with:

- `@contract(Capability)` on a class turns it into a reusable contract test
  suite for `Capability`. Its `@inject` method receives the producer.
- `@contract_impl(Target, skip=[...])` on a class turns it into an
  implementation suite for the concrete type `Target`. Its `@inject` method
  takes no argument and returns the producer.
- `@capability` marks a class as a capability even when it is not abstract.

Markers only attach attributes; nothing is registered globally. The scan
phase reads them back through the accessors at the bottom of this module.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

C = TypeVar("C", bound=type)
F = TypeVar("F", bound=Callable)

CONTRACT_ATTR = "__contract_capability__"  # pragma: no mutate
IMPL_ATTR = "__contract_impl__"  # pragma: no mutate
INJECT_ATTR = "__contract_inject__"  # pragma: no mutate
CAPABILITY_ATTR = "__contract_is_capability__"  # pragma: no mutate

TEST_PREFIX = "test"  # pragma: no mutate


@dataclass(frozen=True)
class ImplSpec:
    """What an `@contract_impl` decorator recorded.

    Attributes:
        target: The concrete type under test, or None for dynamic members that
            inherit it from their enclosing dynamic suite.
        skip: Capabilities whose contract tests must not run for this target.
    """

    target: type | None
    skip: tuple[type, ...] = ()


def _require_class(value: object, decorator: str) -> None:
    if not isinstance(value, type):
        raise TypeError(f"{decorator} expects a class, got {value!r}")


def contract(target: type) -> Callable[[C], C]:
    """Declare the decorated class as the contract test suite for `target`.

    Args:
        target: The capability (abstract class or protocol) the suite validates.

    Raises:
        TypeError: If `target` or the decorated object is not a class.
    """
    _require_class(target, "@contract")

    def decorate(cls: C) -> C:
        _require_class(cls, "@contract")
        setattr(cls, CONTRACT_ATTR, target)
        return cls

    return decorate


def contract_impl(
    target: type | None = None, *, skip: Iterable[type] = ()
) -> Callable[[C], C]:
    """Declare the decorated class as the implementation suite for `target`.

    Args:
        target: The concrete type whose capabilities are resolved. May be
            omitted on classes listed by a `Dynamic` suite.
        skip: Capabilities whose contract tests are excluded for this target.
            Matching is by exact class identity.

    Raises:
        TypeError: If `target`, an entry of `skip` or the decorated object is
            not a class.
    """
    if target is not None:
        _require_class(target, "@contract_impl")
    skipped = tuple(skip)
    for entry in skipped:
        _require_class(entry, "@contract_impl(skip=...)")
    spec = ImplSpec(target=target, skip=skipped)

    def decorate(cls: C) -> C:
        _require_class(cls, "@contract_impl")
        setattr(cls, IMPL_ATTR, spec)
        return cls

    return decorate


def inject(fn: F) -> F:
    """Mark a method as the producer injection point.

    On a contract declaration it is the setter receiving the producer; on an
    implementation suite it is the zero-argument accessor returning it.
    """
    setattr(fn, INJECT_ATTR, True)
    return fn


def capability(cls: C) -> C:
    """Mark a concrete class as a capability."""
    _require_class(cls, "@capability")
    setattr(cls, CAPABILITY_ATTR, True)
    return cls


# ============================================================================
#                               Accessors
# ============================================================================


def contract_target(cls: type) -> type | None:
    """Return the capability declared by `@contract` on `cls` itself.

    Subclasses of a contract class are not contracts unless decorated again.
    """
    return vars(cls).get(CONTRACT_ATTR)


def is_contract(cls: object) -> bool:
    """Return True if `cls` is a class decorated with `@contract`."""
    return isinstance(cls, type) and contract_target(cls) is not None


def impl_spec(cls: type) -> ImplSpec | None:
    """Return the `@contract_impl` declaration of `cls` (inherited ones included)."""
    spec = getattr(cls, IMPL_ATTR, None)
    return spec if isinstance(spec, ImplSpec) else None


def is_contract_impl(cls: object) -> bool:
    """Return True if `cls` is a class carrying an `@contract_impl` declaration."""
    return isinstance(cls, type) and impl_spec(cls) is not None


def is_marked_capability(cls: type) -> bool:
    """Return True if `cls` itself was decorated with `@capability`."""
    return bool(vars(cls).get(CAPABILITY_ATTR, False))


def is_injection_point(obj: object) -> bool:
    """Return True if `obj` is a function decorated with `@inject`."""
    return bool(getattr(obj, INJECT_ATTR, False))


def injection_points(cls: type) -> list[str]:
    """Return the names of the `@inject` methods visible on `cls`."""
    names: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if is_injection_point(attr):
                names[name] = None
    # an override without the marker hides the base class injection point
    return [
        name
        for name in names
        if is_injection_point(inspect.getattr_static(cls, name, None))
    ]


def list_test_methods(cls: type) -> list[str]:
    """Return the test method names of `cls`, base classes first.

    Test methods are functions whose name starts with ``test``, following
    pytest's default ``python_functions`` convention.
    """
    names: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if name.startswith(TEST_PREFIX) and inspect.isfunction(attr):
                names[name] = None
    return [
        name
        for name in names
        if inspect.isfunction(inspect.getattr_static(cls, name, None))
    ]


def defining_class(cls: type, name: str) -> type | None:
    """Return the class in the MRO of `cls` whose body defines `name`."""
    for klass in cls.__mro__:
        if name in vars(klass):
            return klass
    return None
