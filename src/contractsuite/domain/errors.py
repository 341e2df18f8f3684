"""Domain-layer error definitions.

Two families live here. `StructuralError` subclasses are raised and abort the
resolution of one implementation only. `DeclarationError` subclasses are
never raised while registering or resolving: they are recorded on the
`ContractDeclaration` they describe and only surface when the synthetic
error unit for that declaration runs.
"""

from __future__ import annotations

from collections.abc import Sequence


def qualified_name(tp: type) -> str:
    """Return the fully-qualified ``module.qualname`` of a class."""
    return f"{tp.__module__}.{tp.__qualname__}"


# ============================================================================
#                           General errors
# ============================================================================


class ContractSuiteError(Exception):
    """Base class for contractsuite errors."""


# ============================================================================
#              Structural errors (fatal for one implementation)
# ============================================================================


class StructuralError(ContractSuiteError):
    """Raised when an implementation suite cannot be resolved at all."""


class MissingContractImplError(StructuralError):
    """Raised when a suite class carries no `@contract_impl` declaration."""

    def __init__(self, suite_type: type) -> None:
        super().__init__(
            f"Suite classes resolved by contractsuite [{qualified_name(suite_type)}] "
            "must be decorated with @contract_impl"
        )
        self.suite_type = suite_type


class NoCapabilityDeclaredError(StructuralError):
    """Raised when an implementation declaration names no type under test."""

    def __init__(self, suite_type: type) -> None:
        super().__init__(
            f"@contract_impl on {qualified_name(suite_type)} does not name "
            "the implementation under test"
        )
        self.suite_type = suite_type


class SuiteInstantiationError(StructuralError):
    """Raised when a suite class cannot be instantiated."""

    def __init__(self, suite_type: type, reason: BaseException) -> None:
        super().__init__(
            f"Unable to instantiate suite {qualified_name(suite_type)}: {reason!r}"
        )
        self.suite_type = suite_type
        self.reason = reason


class MissingProducerError(StructuralError):
    """Raised when contract tests apply but the suite supplies no producer."""

    def __init__(self, suite_type: type) -> None:
        super().__init__(
            f"Suite {qualified_name(suite_type)} resolved contract tests but has no "
            "@inject method returning a Producer"
        )
        self.suite_type = suite_type


class AmbiguousProducerError(StructuralError):
    """Raised when a suite declares more than one producer accessor."""

    def __init__(self, suite_type: type, names: Sequence[str]) -> None:
        super().__init__(
            f"Suite {qualified_name(suite_type)} must declare a single @inject "
            f"producer accessor, found {', '.join(names)}"
        )
        self.suite_type = suite_type
        self.names = tuple(names)


class NoTestsFoundError(StructuralError):
    """Raised when an implementation resolves neither contract nor direct tests."""

    def __init__(self, suite_type: type, target: type) -> None:
        super().__init__(
            f"No tests found for implementation {qualified_name(target)} "
            f"(suite {qualified_name(suite_type)})"
        )
        self.suite_type = suite_type
        self.target = target


class EmptyDynamicSuiteError(StructuralError):
    """Raised when a dynamic suite supplies no classes to execute."""

    def __init__(self, suite_type: type) -> None:
        super().__init__(
            f"Dynamic suite {qualified_name(suite_type)} did not return a list "
            "of classes to execute"
        )
        self.suite_type = suite_type


# ============================================================================
#              Declaration errors (recorded, surfaced at run time)
# ============================================================================


class DeclarationError(ContractSuiteError):
    """Base class for problems recorded on a contract declaration."""

    def __init__(self, declaring_type: type, message: str) -> None:
        super().__init__(message)
        self.declaring_type = declaring_type


class AbstractDeclarationError(DeclarationError):
    """Recorded when a class decorated with `@contract` is abstract."""

    def __init__(self, declaring_type: type) -> None:
        super().__init__(
            declaring_type,
            f"Classes decorated with @contract ({qualified_name(declaring_type)}) "
            "must not be abstract",
        )


class MissingInjectionPointError(DeclarationError):
    """Recorded when a contract declaration has no `@inject` setter."""

    def __init__(self, declaring_type: type) -> None:
        super().__init__(
            declaring_type,
            f"Classes decorated with @contract ({qualified_name(declaring_type)}) "
            "must include an @inject decorated producer setter",
        )


class MultipleInjectionPointsError(DeclarationError):
    """Recorded when a contract declaration has more than one `@inject` setter."""

    def __init__(self, declaring_type: type, names: Sequence[str]) -> None:
        super().__init__(
            declaring_type,
            f"Classes decorated with @contract ({qualified_name(declaring_type)}) "
            f"must include exactly one @inject setter, found {', '.join(names)}",
        )
        self.names = tuple(names)


class AbstractInjectionPointError(DeclarationError):
    """Recorded when the `@inject` setter of a declaration is abstract."""

    def __init__(self, declaring_type: type, name: str) -> None:
        super().__init__(
            declaring_type,
            f"The @inject setter {name}() of {qualified_name(declaring_type)} "
            "must not be abstract",
        )
        self.name = name


class MalformedInjectionPointError(DeclarationError):
    """Recorded when the `@inject` setter does not take exactly one producer."""

    def __init__(self, declaring_type: type, name: str, reason: str) -> None:
        super().__init__(
            declaring_type,
            f"The @inject setter {name}() of {qualified_name(declaring_type)} "
            f"must accept a single producer argument: {reason}",
        )
        self.name = name


class DeclarationParseError(ContractSuiteError):
    """Raised by the error unit of a malformed contract declaration."""

    def __init__(
        self, declaring_type: type, errors: Sequence[DeclarationError]
    ) -> None:
        lines = [f"Errors during parsing of suite {qualified_name(declaring_type)}:"]
        lines.extend(f"  - {error}" for error in errors)
        super().__init__("\n".join(lines))
        self.declaring_type = declaring_type
        self.errors = tuple(errors)
