from __future__ import annotations

import shutil

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sb_ui.tui.models import TableModel


def _console_width(console: Console) -> int | None:
    width = console.size.width
    if width > 0:
        return width
    columns = shutil.get_terminal_size(fallback=(100, 24)).columns
    return columns if columns > 0 else None


def build_rich_table(
    model: TableModel,
    *,
    console: Console,
    show_lines: bool = False,
    border_style: str = "blue",
    header_style: str = "bold blue",
    title_style: str = "bold blue",
    box_style: box.Box = box.ROUNDED,
) -> Table:
    """
    Build a Rich Table from a TableModel that fits the current terminal width.

    Numeric-looking columns (everything but the first) are right-aligned.
    """
    term_width = _console_width(console)
    max_table_width = max(60, (term_width - 2) if term_width else 100)

    title_text = Text.from_markup(str(model.title))
    title_text.no_wrap = True
    title_text.overflow = "ellipsis"

    rich_table = Table(
        title=title_text,
        show_lines=show_lines,
        width=None,
        box=box_style,
        border_style=border_style,
        header_style=header_style,
        title_style=title_style,
    )
    for idx, col in enumerate(model.columns):
        rich_table.add_column(
            col,
            overflow="ellipsis",
            no_wrap=True,
            justify="left" if idx == 0 else "right",
            max_width=max_table_width,
        )
    for row in model.rows:
        rich_table.add_row(*row)
    return rich_table
