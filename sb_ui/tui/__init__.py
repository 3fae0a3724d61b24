"""Terminal UI building blocks (rich and headless)."""

from sb_ui.tui.headless import HeadlessUI
from sb_ui.tui.models import TableModel
from sb_ui.tui.protocols import UI
from sb_ui.tui.rich_ui import RichUI

__all__ = ["HeadlessUI", "RichUI", "TableModel", "UI"]
