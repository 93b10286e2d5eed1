#!/usr/bin/env python3
"""
lineshell Output Formatting
Renders help listings, history and error lines as plain text for a shell sink
"""

from io import StringIO
from typing import Iterable, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..history import HistoryEntry

RENDER_WIDTH = 100


def _render(renderable) -> str:
    buffer = StringIO()
    console = Console(
        file=buffer,
        width=RENDER_WIDTH,
        force_terminal=False,
        color_system=None,
        highlight=False,
        emoji=False,
    )
    console.print(renderable)
    return buffer.getvalue()


def format_help(rows: Iterable[Tuple[str, str]]) -> str:
    """Borderless three-column listing: name, ':', help"""
    table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 1))
    table.add_column("Command", no_wrap=True)
    table.add_column("Sep", no_wrap=True)
    table.add_column("Description")
    for name, help_text in rows:
        table.add_row(Text(name), Text(":"), Text(help_text or ""))
    return "\n".join(line.rstrip() for line in _render(table).splitlines()) + "\n"


def format_history(entries: Iterable[HistoryEntry]) -> str:
    return "".join(f"{entry}\n" for entry in entries)


def format_error(error, prefix: str = "Error: ") -> str:
    message = getattr(error, "message", None) or str(error)
    return f"{prefix}{message}\n"
