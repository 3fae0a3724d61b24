"""Markdown and JSON renderers for a benchmark comparison."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from sb_common.errors import ReportError
from sb_report.engine import (
    VERDICT_MATCH,
    Comparison,
    ComparisonRow,
    ReportItem,
    build_comparison,
)
from sb_report.formatting import format_bytes, format_ms, format_speedup
from sb_runner.models import ClientFailure, Result

PERF_COLUMNS = ["Client", "Elapsed", "Trie Time", "DB Write", "Peak Mem", "DB Size", "Speedup"]
COUNT_COLUMNS = ["Client", "Accounts", "Contracts", "Storage Slots"]
FAILED = "FAILED"


def _markdown_table(columns: list[str], rows: list[list[str]]) -> list[str]:
    header = "| " + " | ".join(columns) + " |"
    divider = "|" + "|".join("-" * (len(col) + 2) for col in columns) + "|"
    body = ["| " + " | ".join(row) + " |" for row in rows]
    return [header, divider, *body]


def performance_rows(comparison: Comparison) -> list[list[str]]:
    """Display rows for the timing/memory table, failures included."""
    rows: list[list[str]] = []
    for entry in comparison.entries:
        if isinstance(entry, ComparisonRow):
            r = entry.result
            rows.append(
                [
                    r.client,
                    format_ms(r.elapsed_ms),
                    format_ms(r.trie_time_ms),
                    format_ms(r.db_write_time_ms),
                    format_bytes(r.peak_memory_bytes),
                    format_bytes(r.db_size_bytes),
                    format_speedup(entry.speedup),
                ]
            )
        else:
            rows.append([entry.client, FAILED, "-", "-", "-", "-", "-"])
    return rows


def count_rows(comparison: Comparison) -> list[list[str]]:
    rows: list[list[str]] = []
    for entry in comparison.entries:
        if isinstance(entry, ComparisonRow):
            r = entry.result
            rows.append(
                [r.client, str(r.accounts_created), str(r.contracts_created), str(r.storage_slots)]
            )
        else:
            rows.append([entry.client, FAILED, "-", "-"])
    return rows


def root_summary_lines(comparison: Comparison) -> list[str]:
    verdict = comparison.verdict
    lines = [f"State roots: **{verdict}**"]
    if verdict != VERDICT_MATCH:
        lines.extend(f"  - {client}: {root}" for client, root in comparison.root_check.roots)
    return lines


def render_markdown(items: Sequence[ReportItem]) -> str:
    """Render the Markdown comparison report.

    Raises:
        ReportError: ``items`` is empty.
    """
    comparison = build_comparison(items)

    lines = ["## Benchmark Results", ""]
    lines.extend(root_summary_lines(comparison))
    lines.append("")
    lines.extend(_markdown_table(PERF_COLUMNS, performance_rows(comparison)))
    lines.append("")
    lines.extend(_markdown_table(COUNT_COLUMNS, count_rows(comparison)))

    if comparison.failures:
        lines.append("")
        lines.append("Failures:")
        lines.extend(
            f"  - {f.client} ({f.error_type}): {f.message}" for f in comparison.failures
        )
    return "\n".join(lines) + "\n"


def _json_entry(entry: ComparisonRow | ClientFailure) -> dict[str, Any]:
    if isinstance(entry, ComparisonRow):
        return entry.result.to_dict()
    return entry.to_dict()


def render_json(items: Sequence[ReportItem]) -> str:
    """Render every Result field unmodified as an indented JSON array.

    Raises:
        ReportError: ``items`` is empty.
    """
    comparison = build_comparison(items)
    payload = [_json_entry(entry) for entry in comparison.entries]
    return json.dumps(payload, indent=2) + "\n"


def load_results(path: Path) -> list[Result | ClientFailure]:
    """Read a JSON report written by ``render_json`` back into report items."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ReportError(
            f"cannot read results file {path}", context={"path": path}, cause=exc
        ) from exc

    if not isinstance(payload, list):
        raise ReportError("results file must contain a JSON array", context={"path": path})

    items: list[Result | ClientFailure] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise ReportError(
                f"entry {index} is not an object", context={"path": path, "index": index}
            )
        if "error" in entry and "state_root" not in entry:
            items.append(
                ClientFailure(
                    client=str(entry.get("client", "")),
                    error_type=str(entry.get("error_type", "")),
                    message=str(entry["error"]),
                )
            )
            continue
        try:
            items.append(Result.model_validate(entry))
        except ValidationError as exc:
            raise ReportError(
                f"entry {index} is not a valid result",
                context={"path": path, "index": index},
                cause=exc,
            ) from exc
    return items
