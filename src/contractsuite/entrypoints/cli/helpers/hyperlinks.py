"""OSC-8 hyperlink utilities for the contractsuite CLI.

Detects whether the active text stream supports OSC-8 terminal hyperlinks and
renders paths (report files) as clickable links, falling back to plain text
when unsupported. Pure formatting only.
"""

import os
import sys
from pathlib import Path
from typing import TextIO


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether the target stream supports OSC-8 hyperlinks.

    Args:
        stream: File-like text stream to probe; defaults to ``sys.stderr``,
            where the CLI writes its notices.

    Returns:
        bool: ``True`` if hyperlinks should be emitted; ``False`` otherwise.
    """
    stream = stream or sys.stderr
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program
        in {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(target: str | Path, text: str | None = None) -> str:
    """Return an OSC-8 hyperlink with a plain-text fallback.

    Args:
        target: URL, or a filesystem path turned into a ``file://`` URL.
        text: Visible text; defaults to `target` as given.

    Returns:
        str: The text wrapped in OSC-8 sequences when supported, otherwise
        the plain text.
    """
    label = text if text is not None else str(target)
    if not supports_osc8():
        return label
    url = target.resolve().as_uri() if isinstance(target, Path) else target
    return f"\x1b]8;;{url}\x07{label}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL
