"""Interface for dynamic implementation suites."""

import abc
from collections.abc import Sequence

# pylint: disable=too-few-public-methods


class Dynamic(abc.ABC):
    """Contract for a suite that supplies its implementations at run time.

    A class decorated with `@contract_impl` that also subclasses `Dynamic`
    does not name a single implementation. Instead, `suite_classes()` returns
    the classes to run: classes decorated with `@contract_impl` are resolved
    like any other implementation suite (inheriting this suite's target,
    exclusions and producer where they declare none), every other class is
    run as an ordinary test class.
    """

    @abc.abstractmethod
    def suite_classes(self) -> Sequence[type]:
        """Return the classes making up this suite, in execution order."""
