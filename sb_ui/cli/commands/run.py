from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from sb_common.api import ExecutionContext, SBError, configure_logging, describe_error
from sb_report.api import build_comparison, render_json, render_markdown
from sb_runner.api import BenchmarkSession, FailurePolicy, RunSettings, SessionResult
from sb_ui.presenters.results import build_result_tables
from sb_ui.wiring.dependencies import UIContext
from sb_workload.api import DISTRIBUTIONS

EXIT_FAILURE = 1
EXIT_ROOT_MISMATCH = 2


def split_clients(values: Optional[List[str]]) -> Optional[List[str]]:
    """Flatten ``--clients a,b --clients c`` into ``["a", "b", "c"]``."""
    if not values:
        return None
    return [name.strip() for value in values for name in value.split(",") if name.strip()]


def load_settings(config: Optional[Path], overrides: dict) -> RunSettings:
    base = RunSettings.load(config) if config is not None else RunSettings()
    return base.merged(overrides)


def show_session(
    ctx: UIContext,
    session: SessionResult,
    *,
    output_json: bool,
    rich_tables: bool,
) -> bool:
    """Render the session outcomes; returns True when the roots agree."""
    comparison = build_comparison(session.outcomes)
    if output_json:
        ctx.ui.output(render_json(session.outcomes))
    elif rich_tables:
        for table in build_result_tables(comparison):
            ctx.ui.tables.show(table)
    else:
        ctx.ui.output(render_markdown(session.outcomes))
    return comparison.root_check.matching


def register_run_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register the main run command on the given Typer app."""

    @app.command("run")
    def run(
        config: Optional[Path] = typer.Option(
            None, "--config", "-c", help="JSON or YAML run configuration; flags override it."
        ),
        accounts: Optional[int] = typer.Option(None, "--accounts", help="Number of EOA accounts to create."),
        contracts: Optional[int] = typer.Option(None, "--contracts", help="Number of contracts to create."),
        max_slots: Optional[int] = typer.Option(None, "--max-slots", help="Maximum storage slots per contract."),
        min_slots: Optional[int] = typer.Option(None, "--min-slots", help="Minimum storage slots per contract."),
        distribution: Optional[str] = typer.Option(
            None, "--distribution", help=f"Storage slot distribution: {', '.join(DISTRIBUTIONS)}."
        ),
        seed: Optional[int] = typer.Option(None, "--seed", help="Random seed (0 = use current time)."),
        code_size: Optional[int] = typer.Option(None, "--code-size", help="Average contract code size in bytes."),
        clients: Optional[List[str]] = typer.Option(
            None, "--clients", help="Clients to benchmark (e.g. geth,reth,erigon)."
        ),
        db_dir: Optional[Path] = typer.Option(None, "--db-dir", help="Base directory for client databases."),
        workload: Optional[Path] = typer.Option(
            None, "--workload", help="Path to pre-generated workload file (skip generation)."
        ),
        keep_workload: Optional[Path] = typer.Option(
            None, "--keep-workload", help="Write the generated workload here instead of a temp file."
        ),
        harnesses_dir: Optional[Path] = typer.Option(
            None, "--harnesses-dir", help="Path to harnesses directory (default: ./harnesses)."
        ),
        skip_build: bool = typer.Option(False, "--skip-build", help="Skip building harness binaries."),
        timeout: Optional[float] = typer.Option(
            None, "--timeout", help="Per-client timeout in seconds (default: 1800, 0 disables it)."
        ),
        keep_going: bool = typer.Option(
            False, "--keep-going", help="Report failed clients as FAILED rows instead of aborting."
        ),
        stop_file: Optional[Path] = typer.Option(
            None, "--stop-file", help="Stop before the next client once this file exists."
        ),
        output_json: bool = typer.Option(False, "--json", help="Output results as JSON instead of table."),
        rich_tables: bool = typer.Option(False, "--rich", help="Render results as rich terminal tables."),
        fail_on_mismatch: bool = typer.Option(
            False, "--fail-on-mismatch", help="Exit with status 2 when state roots disagree."
        ),
        debug: bool = typer.Option(False, "--debug", help="Enable verbose debug logging."),
    ) -> None:
        """Run state benchmarks across clients and compare roots and performance."""
        if debug:
            configure_logging(debug=True, force=True)

        overrides = {
            "workload": {
                "accounts": accounts,
                "contracts": contracts,
                "max_slots": max_slots,
                "min_slots": min_slots,
                "distribution": distribution,
                "seed": seed,
                "code_size": code_size,
            },
            "clients": split_clients(clients),
            "db_dir": db_dir,
            "workload_path": workload,
            "keep_workload": keep_workload,
            "harnesses_dir": harnesses_dir,
            "skip_build": True if skip_build else None,
            "timeout_seconds": timeout,
            "failure_policy": FailurePolicy.COLLECT if keep_going else None,
            "output_json": True if output_json else None,
            "stop_file": stop_file,
        }

        try:
            settings = load_settings(config, overrides)
            context = ExecutionContext(settings=settings, logger=logging.getLogger("statebench"))
            session = BenchmarkSession(context).run()
        except SBError as exc:
            ctx.ui.present.error(describe_error(exc))
            raise typer.Exit(EXIT_FAILURE)

        matching = show_session(
            ctx, session, output_json=settings.output_json, rich_tables=rich_tables
        )

        if session.failures:
            ctx.ui.present.error(f"{len(session.failures)} client(s) failed")
            raise typer.Exit(EXIT_FAILURE)
        if not matching:
            ctx.ui.present.warning("State roots do not match")
            if fail_on_mismatch:
                raise typer.Exit(EXIT_ROOT_MISMATCH)
