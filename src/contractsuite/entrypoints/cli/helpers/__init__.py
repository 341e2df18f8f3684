"""Small helpers shared by the CLI commands."""

from .hyperlinks import hyperlink
from .messages import error, success, warn
from .suite_refs import default_packages, parse_suite_refs

__all__ = [
    "default_packages",
    "error",
    "hyperlink",
    "parse_suite_refs",
    "success",
    "warn",
]
