"""Ready-made producer implementations."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from contractsuite.interfaces.producer import Producer

T = TypeVar("T")


class CallableProducer(Producer[T], Generic[T]):
    """Producer backed by a factory callable.

    Each `new_instance()` calls `factory()`. `clean_up()` passes every
    instance produced since the previous clean-up to `cleanup`, most recent
    first, then forgets them.

    Args:
        factory: Zero-argument callable returning a new implementation.
        cleanup: Optional callable releasing one produced instance.
    """

    def __init__(
        self, factory: Callable[[], T], cleanup: Callable[[T], object] | None = None
    ) -> None:
        self._factory = factory
        self._cleanup = cleanup
        self._produced: list[T] = []

    @property
    def produced(self) -> tuple[T, ...]:
        """Instances handed out and not yet cleaned up."""
        return tuple(self._produced)

    def new_instance(self) -> T:
        instance = self._factory()
        self._produced.append(instance)
        return instance

    def clean_up(self) -> None:
        produced, self._produced = self._produced, []
        if self._cleanup is None:
            return
        for instance in reversed(produced):
            self._cleanup(instance)

    def __repr__(self) -> str:
        return f"CallableProducer({self._factory!r})"
