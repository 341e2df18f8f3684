"""Discovery adapters.

`PackageScanner` imports packages and enumerates the classes their modules
define; `InMemorySource` serves fixed lists and is intended for tests and for
callers that already hold the classes.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Iterable, Iterator
from functools import cached_property
from types import ModuleType

from contractsuite.domain.capabilities import is_capability
from contractsuite.interfaces.discovery import DeclarationSource

logger = logging.getLogger(__name__)


class PackageScanner(DeclarationSource):
    """Scan Python packages for candidate classes.

    Every package is imported and its submodules are walked recursively.
    Modules that fail to import are logged and skipped so that one broken
    module does not hide the rest of the scan. Each class is yielded once, from
    the module that defines it.

    Args:
        packages: Dotted names of packages (or plain modules) to scan.
    """

    def __init__(self, packages: Iterable[str]) -> None:
        self.packages = tuple(packages)
        self.failed_imports: dict[str, Exception] = {}

    def _import(self, name: str) -> ModuleType | None:
        try:
            return importlib.import_module(name)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("Unable to import %s: %s", name, e)
            self.failed_imports[name] = e
            return None

    def _modules(self) -> Iterator[ModuleType]:
        for package_name in self.packages:
            if (package := self._import(package_name)) is None:
                continue
            yield package
            path = getattr(package, "__path__", None)
            if path is None:
                continue
            for info in pkgutil.walk_packages(
                path, prefix=f"{package.__name__}.", onerror=self._walk_error
            ):
                if (module := self._import(info.name)) is not None:
                    yield module

    def _walk_error(self, name: str) -> None:
        logger.warning("Unable to walk package %s", name)
        self.failed_imports.setdefault(name, ImportError(name))

    @cached_property
    def _classes(self) -> tuple[type, ...]:
        found: dict[type, None] = {}
        for module in self._modules():
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ == module.__name__:
                    found[obj] = None
        logger.debug("Scanned %s: %d class(es)", ", ".join(self.packages), len(found))
        return tuple(found)

    def declaration_types(self) -> Iterable[type]:
        return self._classes

    def implementation_types(self) -> Iterable[type]:
        return tuple(tp for tp in self._classes if not is_capability(tp))


class InMemorySource(DeclarationSource):
    """Serve fixed lists of candidate classes."""

    def __init__(
        self, declarations: Iterable[type] = (), implementations: Iterable[type] = ()
    ) -> None:
        self._declarations = tuple(declarations)
        self._implementations = tuple(implementations)

    def declaration_types(self) -> Iterable[type]:
        return self._declarations

    def implementation_types(self) -> Iterable[type]:
        return self._implementations
