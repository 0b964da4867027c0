"""Terminal output for the cds commands.

Status lines carry a colored marker; resolution lines, command lines and
JSON are printed so that their brackets reach the terminal untouched.
Colors are off when NO_COLOR is set or --no-color is given.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Build the console used by every command.

    Args:
        no_color: Disable colors, in addition to the NO_COLOR variable.
    """
    disabled = no_color or _force_no_color
    return Console(
        force_terminal=False if disabled else None,
        no_color=disabled,
        highlight=False,
    )


console = create_console()


def _marked(marker: str, style: str, message: str) -> None:
    console.print(f"[{style}]{marker}[/{style}] {message}")


def success(message: str) -> None:
    """Report a finished step, e.g. ``✓ Archive dump finished: app.jsa``."""
    _marked("✓", "green", message)


def error(message: str) -> None:
    """Report a failure, e.g. ``✗ Invalid method type: LL_LL (line 3)``."""
    _marked("✗", "red", message)


def warning(message: str) -> None:
    """Report a problem that did not stop the command."""
    _marked("⚠", "yellow", message)


def info(message: str) -> None:
    console.print(message)


def plain(message: str) -> None:
    """Print text verbatim, without markup or wrapping."""
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def print_json(data: dict[str, Any]) -> None:
    """Print a validation summary or rejection as JSON."""
    console.print_json(json.dumps(data))


def set_no_color(no_color: bool) -> None:
    """Rebuild the module console for the --no-color flag."""
    global console
    console = create_console(no_color=no_color)
