from __future__ import annotations

import sys
from dataclasses import dataclass, field

from sb_ui.tui.models import TableModel
from sb_ui.tui.presenter_base import PresenterBase, PresenterSink
from sb_ui.tui.protocols import UI


@dataclass
class HeadlessUI(UI):
    """Plain-text UI for CI and tests; records everything it prints."""

    recorded_tables: list[TableModel] = field(default_factory=list)
    recorded_messages: list[str] = field(default_factory=list)
    recorded_output: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.tables = _HeadlessTablePresenter(self)
        self.present = _HeadlessPresenter(self)

    def output(self, text: str) -> None:
        self.recorded_output.append(text)
        sys.stdout.write(text)
        sys.stdout.flush()


class _HeadlessTablePresenter:
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def show(self, table: TableModel) -> None:
        self._ui.recorded_tables.append(table)
        lines = [table.title, "\t".join(table.columns)]
        lines.extend("\t".join(row) for row in table.rows)
        self._ui.output("\n".join(lines) + "\n")


class _HeadlessPresenterSink(PresenterSink):
    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def emit(self, level: str, message: str) -> None:
        line = f"[{level.upper()}] {message}"
        self._ui.recorded_messages.append(line)
        print(line, file=sys.stderr)


class _HeadlessPresenter(PresenterBase):
    def __init__(self, ui: HeadlessUI) -> None:
        super().__init__(_HeadlessPresenterSink(ui))
