"""Resolve ``module:Class`` references given on the command line."""

import importlib

import click


def load_class(ref: str) -> type:
    """Import and return the class named by `ref` (``package.module:Class``).

    Nested classes may be named with dots after the colon.

    Raises:
        click.BadParameter: If the reference is malformed, the module cannot
            be imported, or the attribute is missing or not a class.
    """
    module_name, sep, qualname = ref.partition(":")
    if not sep or not module_name or not qualname:
        raise click.BadParameter(f"Expected MODULE:CLASS, got {ref!r}")
    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import {module_name!r}: {e}") from e
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"{ref!r} does not exist") from e
    if not isinstance(obj, type):
        raise click.BadParameter(f"{ref!r} is not a class")
    return obj


def parse_suite_refs(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: tuple[str, ...],
) -> list[type]:
    """Click callback turning ``MODULE:CLASS`` arguments into classes."""
    return [load_class(ref) for ref in value]


def default_packages(suites: list[type]) -> list[str]:
    """Return the top-level packages defining `suites`, in first-seen order."""
    return list(dict.fromkeys(suite.__module__.split(".")[0] for suite in suites))
