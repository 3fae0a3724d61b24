from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sb_ui.tui.protocols import UI


@dataclass
class UIContext:
    """Container for UI state, initialized lazily."""

    headless: bool = False
    _ui: Optional[UI] = None

    @property
    def ui(self) -> UI:
        if self._ui is None:
            if self.headless:
                from sb_ui.tui.headless import HeadlessUI
                self._ui = HeadlessUI()
            else:
                from sb_ui.tui.rich_ui import RichUI
                self._ui = RichUI()
        return self._ui

    @ui.setter
    def ui(self, value: UI):
        self._ui = value
