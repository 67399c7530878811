"""Console output for wrangler-cli.

All user-facing text goes through the helpers below so ``--no-color`` and
``NO_COLOR`` apply everywhere. Messages are escaped before printing: shader
paths may contain square brackets, which Rich would otherwise read as markup.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console
from rich.markup import escape

_env_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Console, uncolored if asked to or if ``NO_COLOR`` is set."""
    plain = no_color or _env_no_color
    return Console(
        force_terminal=False if plain else None,
        no_color=plain,
        highlight=False,
    )


console = create_console()


def _emit(symbol: str, message: str, **kwargs: Any) -> None:
    prefix = f"{symbol} " if symbol else ""
    console.print(f"{prefix}{escape(message)}", **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print ``message`` after a green check mark.

    Example:
        >>> success("Compiled build/spirv/a.spv_vert")
        ✓ Compiled build/spirv/a.spv_vert
    """
    _emit("[green]✓[/green]", message, **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print ``message`` after a red cross."""
    _emit("[red]✗[/red]", message, **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print ``message`` after a yellow warning sign."""
    _emit("[yellow]⚠[/yellow]", message, **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print ``message`` as is."""
    _emit("", message, **kwargs)


def set_no_color(no_color: bool) -> None:
    """Replace the module console, e.g. for the global ``--no-color`` flag."""
    global console
    console = create_console(no_color=no_color)
