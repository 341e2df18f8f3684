"""Interface for the discovery collaborator."""

import abc
from collections.abc import Iterable


class DeclarationSource(abc.ABC):
    """Supplies the candidate classes the registry and reports are built from.

    Implementations only enumerate classes; deciding which of them are
    contract declarations or implementations is left to the caller.
    """

    @abc.abstractmethod
    def declaration_types(self) -> Iterable[type]:
        """Return candidate declaration classes.

        Contract suites and implementation suites both come from here.
        Classes without either marker may be included; callers ignore them.
        """

    @abc.abstractmethod
    def implementation_types(self) -> Iterable[type]:
        """Return candidate concrete implementation classes.

        Used for reporting which capabilities have no implementation and
        which implementation suites resolve no tests.
        """
