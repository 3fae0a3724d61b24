from __future__ import annotations

from pathlib import Path

import typer

from sb_common.api import SBError, describe_error
from sb_report.api import build_comparison, load_results, render_json, render_markdown
from sb_ui.presenters.results import build_result_tables
from sb_ui.wiring.dependencies import UIContext


def register_report_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register ``report`` on the given Typer app."""

    @app.command("report")
    def report(
        results: Path = typer.Argument(..., help="JSON results written by `run --json`."),
        output_json: bool = typer.Option(False, "--json", help="Re-emit the results as JSON."),
        rich_tables: bool = typer.Option(False, "--rich", help="Render results as rich terminal tables."),
    ) -> None:
        """Re-render a saved JSON result set."""
        try:
            items = load_results(results)
            if output_json:
                ctx.ui.output(render_json(items))
            elif rich_tables:
                for table in build_result_tables(build_comparison(items)):
                    ctx.ui.tables.show(table)
            else:
                ctx.ui.output(render_markdown(items))
        except SBError as exc:
            ctx.ui.present.error(describe_error(exc))
            raise typer.Exit(1)
