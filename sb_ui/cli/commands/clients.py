from __future__ import annotations

from pathlib import Path

import typer

from sb_ui.presenters.results import build_clients_table
from sb_ui.wiring.dependencies import UIContext


def register_clients_command(app: typer.Typer, ctx: UIContext) -> None:
    @app.command("clients")
    def clients(
        harnesses_dir: Path = typer.Option(
            Path("harnesses"), "--harnesses-dir", help="Path to harnesses directory."
        ),
    ) -> None:
        """List known clients and whether their harness is built."""
        ctx.ui.tables.show(build_clients_table(harnesses_dir.resolve()))
