"""Rich Console factory and theme for vouchers output.

Consoles render into a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` function. Rich drops color codes on its own
outside a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

VOUCHERS_THEME = Theme(
    {
        "vch.ok": "bold green",
        "vch.error": "bold red",
        "vch.warning": "bold yellow",
        "vch.op": "bold cyan",
        "vch.key": "dim",
        "vch.code": "bold blue",
        "vch.valid": "green",
        "vch.invalid": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=VOUCHERS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
