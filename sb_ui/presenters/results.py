"""Presenters turning comparisons, summaries and the client registry into tables."""

from __future__ import annotations

from pathlib import Path

from sb_report.api import (
    COUNT_COLUMNS,
    PERF_COLUMNS,
    VERDICT_MATCH,
    Comparison,
    count_rows,
    performance_rows,
)
from sb_runner.api import CLIENTS, KNOWN_CLIENTS, needs_build, resolve_binary
from sb_ui.tui.models import TableModel
from sb_workload.models import Summary


def build_comparison_tables(comparison: Comparison) -> list[TableModel]:
    """Performance and counts tables, titled with the agreement verdict."""
    return [
        TableModel(
            title=f"Benchmark Results (state roots: {comparison.verdict})",
            columns=list(PERF_COLUMNS),
            rows=performance_rows(comparison),
        ),
        TableModel(title="Applied Operations", columns=list(COUNT_COLUMNS), rows=count_rows(comparison)),
    ]


def build_roots_table(comparison: Comparison) -> TableModel:
    return TableModel(
        title="State Roots",
        columns=["Client", "State Root"],
        rows=[[client, root] for client, root in comparison.root_check.roots],
    )


def build_result_tables(comparison: Comparison) -> list[TableModel]:
    """Comparison tables, plus every reported root unless they all agree."""
    tables = build_comparison_tables(comparison)
    if comparison.verdict != VERDICT_MATCH:
        tables.append(build_roots_table(comparison))
    return tables


def build_summary_table(summary: Summary, title: str = "Workload") -> TableModel:
    return TableModel(
        title=title,
        columns=["Operations", "Accounts", "Contracts", "Storage Slots"],
        rows=[
            [
                str(summary.total_operations),
                str(summary.accounts_created),
                str(summary.contracts_created),
                str(summary.storage_slots),
            ]
        ],
    )


def build_clients_table(harnesses_dir: Path) -> TableModel:
    rows = []
    for name in KNOWN_CLIENTS:
        binary = resolve_binary(harnesses_dir, name)
        if needs_build(name):
            status = "built" if binary.exists() else "missing"
            location = str(binary)
        else:
            status = "bundled"
            location = " ".join(CLIENTS[name].launcher(binary).command)
        rows.append([name, location, status])
    return TableModel(title="Clients", columns=["Client", "Harness", "Status"], rows=rows)
