from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from sb_ui.tui import theme
from sb_ui.tui.models import TableModel
from sb_ui.tui.presenter_base import PresenterBase, PresenterSink
from sb_ui.tui.protocols import UI
from sb_ui.tui.table_layout import build_rich_table


class RichTablePresenter:
    def __init__(self, console: Console):
        self._console = console

    def show(self, table: TableModel) -> None:
        rich_table = build_rich_table(
            table,
            console=self._console,
            border_style=theme.RICH_BORDER_STYLE,
            header_style=theme.RICH_ACCENT_BOLD,
            title_style=theme.RICH_ACCENT_BOLD,
        )
        self._console.print(rich_table)


class _RichPresenterSink(PresenterSink):
    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, level: str, message: str) -> None:
        template = theme.PRESENTER_TEMPLATES.get(level, "{message}")
        self._console.print(template.format(message=escape(message)))


class RichPresenter(PresenterBase):
    def __init__(self, console: Console) -> None:
        super().__init__(_RichPresenterSink(console))


class RichUI(UI):
    def __init__(self, console: Console | None = None, err_console: Console | None = None):
        self._console = console or Console()
        self._err_console = err_console or Console(stderr=True)
        self.tables = RichTablePresenter(self._console)
        self.present = RichPresenter(self._err_console)

    def output(self, text: str) -> None:
        """Write a rendered report verbatim to stdout (no markup processing)."""
        self._console.file.write(text)
        self._console.file.flush()
