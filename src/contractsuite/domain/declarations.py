"""Typed declaration records built from the markers.

`ContractDeclaration` describes one reusable contract test suite and records,
rather than raises, everything that is wrong with it. `ImplementationDeclaration`
describes one implementation suite; problems that make it unresolvable are
raised as `StructuralError`.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contractsuite.interfaces.dynamic import Dynamic

from .errors import (
    AbstractDeclarationError,
    AbstractInjectionPointError,
    AmbiguousProducerError,
    DeclarationError,
    MalformedInjectionPointError,
    MissingContractImplError,
    MissingInjectionPointError,
    MissingProducerError,
    MultipleInjectionPointsError,
    NoCapabilityDeclaredError,
    SuiteInstantiationError,
    qualified_name,
)
from .markers import (
    contract_target,
    defining_class,
    impl_spec,
    injection_points,
    is_contract,
    list_test_methods,
)

if TYPE_CHECKING:
    from contractsuite.interfaces.producer import Producer

    from .capabilities import Capability

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


# ============================================================================
#                           Contract declarations
# ============================================================================


@dataclass(frozen=True, eq=False)
class ContractDeclaration:
    """A reusable contract test suite validating exactly one capability.

    Two declaration objects are distinct even when they describe the same
    class; `key` is what identifies the suite when deduplicating a plan.

    Attributes:
        declaring_type: The class decorated with `@contract`.
        capability: The capability class it validates.
        inject_method: Name of the producer setter, None when it is unusable.
        errors: Everything wrong with the declaration; empty when well-formed.
    """

    declaring_type: type
    capability: type
    inject_method: str | None = None
    errors: tuple[DeclarationError, ...] = ()

    @classmethod
    def from_type(cls, declaring_type: type) -> ContractDeclaration:
        """Build the declaration for a class decorated with `@contract`.

        Structural problems of the class are recorded in `errors`; this method
        does not raise for them.

        Raises:
            ValueError: If `declaring_type` is not decorated with `@contract`.
        """
        target = contract_target(declaring_type)
        if target is None:
            raise ValueError(
                f"{qualified_name(declaring_type)} is not decorated with @contract"
            )

        errors: list[DeclarationError] = []
        if inspect.isabstract(declaring_type):
            errors.append(AbstractDeclarationError(declaring_type))

        inject_method = None
        names = injection_points(declaring_type)
        if not names:
            errors.append(MissingInjectionPointError(declaring_type))
        elif len(names) > 1:
            errors.append(MultipleInjectionPointsError(declaring_type, names))
        elif setter_errors := _check_setter(declaring_type, names[0]):
            errors.extend(setter_errors)
        else:
            inject_method = names[0]

        declaration = cls(declaring_type, target, inject_method, tuple(errors))
        if errors:
            logger.debug("%s recorded %d error(s)", declaration, len(errors))
        return declaration

    @property
    def name(self) -> str:
        """Fully-qualified name of the declaring class."""
        return qualified_name(self.declaring_type)

    @property
    def capability_name(self) -> str:
        """Fully-qualified name of the validated capability."""
        return qualified_name(self.capability)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the suite: declaring type plus target capability."""
        return (self.name, self.capability_name)

    @property
    def is_valid(self) -> bool:
        """True when no error was recorded."""
        return not self.errors

    def test_names(self) -> list[str]:
        """Return the contract test method names, inherited ones included."""
        return list_test_methods(self.declaring_type)

    def __str__(self) -> str:
        return (
            f"[{self.declaring_type.__qualname__} testing "
            f"{self.capability.__qualname__}]"
        )


def _check_setter(declaring_type: type, name: str) -> list[DeclarationError]:
    fn = inspect.getattr_static(declaring_type, name)
    if getattr(fn, "__isabstractmethod__", False):
        return [AbstractInjectionPointError(declaring_type, name)]
    if not inspect.isfunction(fn):
        return [
            MalformedInjectionPointError(
                declaring_type, name, "it must be a plain instance method"
            )
        ]

    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        return [MalformedInjectionPointError(declaring_type, name, str(e))]

    params = list(signature.parameters.values())[1:]  # drop self
    accepts_one = any(p.kind in _POSITIONAL for p in params) or any(
        p.kind is inspect.Parameter.VAR_POSITIONAL for p in params
    )
    required = [p for p in params if p.default is p.empty and p.kind not in _VARIADIC]
    if not accepts_one:
        reason = "it takes no argument"
    elif len(required) > 1:
        reason = f"it requires {len(required)} arguments"
    else:
        return []
    return [MalformedInjectionPointError(declaring_type, name, reason)]


# ============================================================================
#                        Implementation declarations
# ============================================================================


@dataclass(frozen=True, eq=False)
class ImplementationDeclaration:
    """An implementation suite: a concrete type under test plus its exclusions.

    Attributes:
        suite_type: The class decorated with `@contract_impl`.
        target: The concrete type whose capabilities are resolved. None only
            for a dynamic suite, which supplies its targets at run time.
        skip: Capabilities whose contract tests must not run for `target`.
        instance: The object supplying producers.
        producer_method: Name of the zero-argument `@inject` accessor on
            `instance`, or None when the suite declares none.
        parent: The enclosing dynamic declaration, for dynamic members.
    """

    suite_type: type
    target: type | None
    skip: tuple[type, ...] = ()
    instance: object = None
    producer_method: str | None = None
    parent: ImplementationDeclaration | None = None

    @classmethod
    def from_type(cls, suite_type: type) -> ImplementationDeclaration:
        """Build the declaration of an implementation (or dynamic) suite.

        Raises:
            MissingContractImplError: If `suite_type` has no `@contract_impl`.
            NoCapabilityDeclaredError: If a non-dynamic suite names no target.
            SuiteInstantiationError: If `suite_type()` fails.
            AmbiguousProducerError: If more than one producer accessor exists.
        """
        spec = impl_spec(suite_type)
        if spec is None:
            raise MissingContractImplError(suite_type)
        if spec.target is None and not issubclass(suite_type, Dynamic):
            raise NoCapabilityDeclaredError(suite_type)
        producer_method = _producer_method(suite_type)
        return cls(
            suite_type=suite_type,
            target=spec.target,
            skip=spec.skip,
            instance=_instantiate(suite_type),
            producer_method=producer_method,
        )

    @classmethod
    def for_dynamic_member(
        cls, member: type, parent: ImplementationDeclaration
    ) -> ImplementationDeclaration:
        """Build the declaration of a class listed by a dynamic suite.

        The member's own target, exclusions and producer accessor win; what
        it leaves out is inherited from `parent`. Exclusion lists are merged.

        Raises:
            MissingContractImplError: If `member` has no `@contract_impl`.
            NoCapabilityDeclaredError: If neither names a target.
            SuiteInstantiationError: If `member()` fails.
            AmbiguousProducerError: If more than one producer accessor exists.
        """
        spec = impl_spec(member)
        if spec is None:
            raise MissingContractImplError(member)
        target = spec.target or parent.target
        if target is None:
            raise NoCapabilityDeclaredError(member)
        instance = _instantiate(member)
        producer_method = _producer_method(member)
        if producer_method is None:
            instance, producer_method = parent.instance, parent.producer_method
        return cls(
            suite_type=member,
            target=target,
            skip=tuple(dict.fromkeys((*spec.skip, *parent.skip))),
            instance=instance,
            producer_method=producer_method,
            parent=parent,
        )

    @property
    def name(self) -> str:
        """Fully-qualified name of the suite class."""
        return qualified_name(self.suite_type)

    @property
    def is_dynamic(self) -> bool:
        """True when the suite supplies its implementations at run time."""
        return issubclass(self.suite_type, Dynamic)

    def skips(self, capability: Capability) -> bool:
        """Return True if `capability` is excluded (exact class identity)."""
        return any(capability.cls is skipped for skipped in self.skip)

    def producer(self) -> Producer:
        """Invoke the producer accessor and return a producer.

        Raises:
            MissingProducerError: If the suite declares no accessor.
        """
        if self.producer_method is None:
            raise MissingProducerError(self.suite_type)
        return getattr(self.instance, self.producer_method)()

    def direct_test_names(self) -> list[str]:
        """Return the suite's own test methods.

        Tests inherited from a `@contract` class are left out so that they do
        not run twice.
        """
        return [
            name
            for name in list_test_methods(self.suite_type)
            if not is_contract(defining_class(self.suite_type, name))
        ]

    def __str__(self) -> str:
        target = self.target.__qualname__ if self.target else "<dynamic>"
        return f"[{self.suite_type.__qualname__} implementing {target}]"


def _producer_method(suite_type: type) -> str | None:
    # a setter inherited from a contract receives the producer, it does not supply one
    names = [
        name
        for name in injection_points(suite_type)
        if not is_contract(defining_class(suite_type, name))
    ]
    if len(names) > 1:
        raise AmbiguousProducerError(suite_type, names)
    return names[0] if names else None


def _instantiate(suite_type: type) -> object:
    try:
        return suite_type()
    except Exception as e:  # pylint: disable=broad-except
        raise SuiteInstantiationError(suite_type, e) from e
