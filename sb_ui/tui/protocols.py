from __future__ import annotations

from typing import Protocol

from sb_ui.tui.models import TableModel


class TablePresenter(Protocol):
    def show(self, table: TableModel) -> None: ...


class Presenter(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...


class UI(Protocol):
    """Output surface used by CLI commands.

    Status messages go to stderr; tables and rendered reports go to stdout.
    """

    tables: TablePresenter
    present: Presenter

    def output(self, text: str) -> None: ...
