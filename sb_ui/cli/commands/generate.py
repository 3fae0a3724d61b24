from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer

from sb_common.api import SBError, describe_error
from sb_runner.api import WorkloadSettings
from sb_ui.presenters.results import build_summary_table
from sb_ui.wiring.dependencies import UIContext
from sb_workload.api import DISTRIBUTIONS, generate_to_path, validate_workload


def register_workload_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Register ``generate`` and ``validate`` on the given Typer app."""

    @app.command("generate")
    def generate(
        output: Path = typer.Argument(..., help="Where to write the workload (JSON lines)."),
        accounts: int = typer.Option(1000, "--accounts", help="Number of EOA accounts to create."),
        contracts: int = typer.Option(100, "--contracts", help="Number of contracts to create."),
        max_slots: int = typer.Option(10000, "--max-slots", help="Maximum storage slots per contract."),
        min_slots: int = typer.Option(1, "--min-slots", help="Minimum storage slots per contract."),
        distribution: str = typer.Option(
            "power-law", "--distribution", help=f"Storage slot distribution: {', '.join(DISTRIBUTIONS)}."
        ),
        seed: int = typer.Option(0, "--seed", help="Random seed (0 = use current time)."),
        code_size: int = typer.Option(1024, "--code-size", help="Average contract code size in bytes."),
    ) -> None:
        """Generate a workload file without running any client."""
        try:
            settings = WorkloadSettings(
                accounts=accounts,
                contracts=contracts,
                max_slots=max_slots,
                min_slots=min_slots,
                distribution=distribution,
                seed=seed,
                code_size=code_size,
            )
            config = settings.to_config(seed=seed or time.time_ns())
            output.parent.mkdir(parents=True, exist_ok=True)
            summary = generate_to_path(config, output)
        except SBError as exc:
            ctx.ui.present.error(describe_error(exc))
            raise typer.Exit(1)
        except ValueError as exc:
            ctx.ui.present.error(str(exc))
            raise typer.Exit(1)

        ctx.ui.tables.show(build_summary_table(summary))
        ctx.ui.present.success(f"Workload written to {output} (seed {config.seed})")

    @app.command("validate")
    def validate(
        workload: Path = typer.Argument(..., help="Workload file to check."),
    ) -> None:
        """Check a workload file's structure and print its operation counts."""
        try:
            summary = validate_workload(workload)
        except SBError as exc:
            ctx.ui.present.error(describe_error(exc))
            raise typer.Exit(1)

        ctx.ui.tables.show(build_summary_table(summary, title=f"Workload {workload.name}"))
        ctx.ui.present.success("Workload is valid")
