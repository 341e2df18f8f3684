"""Interface for producers of implementations under test."""

import abc
from typing import Generic, TypeVar

T = TypeVar("T")


class Producer(abc.ABC, Generic[T]):
    """Contract for a capability-scoped factory of implementation instances.

    A contract test asks its producer for a fresh instance of the
    implementation under test. The runner calls `clean_up()` after every test
    method, whatever its outcome, so a producer only needs to release what the
    most recently produced instance acquired.
    """

    @abc.abstractmethod
    def new_instance(self) -> T:
        """Return a freshly constructed implementation instance."""

    @abc.abstractmethod
    def clean_up(self) -> None:
        """Release resources acquired by the most recently produced instance."""
