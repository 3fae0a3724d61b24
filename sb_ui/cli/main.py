"""
Command-line interface for statebench.

Generates a synthetic state workload, replays it through each client's
harness and compares state roots, timings and disk usage.
"""

from __future__ import annotations

import typer

from sb_common.api import configure_logging
from sb_ui.cli.commands.clients import register_clients_command
from sb_ui.cli.commands.generate import register_workload_commands
from sb_ui.cli.commands.report import register_report_command
from sb_ui.cli.commands.run import register_run_command
from sb_ui.wiring.dependencies import UIContext

ctx_store = UIContext()

app = typer.Typer(
    help="Benchmark state commitment across execution clients with one shared workload.",
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Force plain-text output (useful in CI).",
    ),
) -> None:
    """Global entry point handling interactive vs headless modes."""
    configure_logging(force=True)
    ctx_store.headless = headless
    ctx_store.ui = None

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


register_run_command(app, ctx_store)
register_workload_commands(app, ctx_store)
register_report_command(app, ctx_store)
register_clients_command(app, ctx_store)


def main() -> None:
    """Entry point for the ``statebench`` console script."""
    app()


if __name__ == "__main__":
    main()
