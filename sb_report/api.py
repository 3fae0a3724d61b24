"""Stable report API surface."""

from sb_report.engine import (
    Comparison,
    ComparisonRow,
    ReportItem,
    VERDICT_INCOMPLETE,
    VERDICT_MATCH,
    VERDICT_MISMATCH,
    RootCheck,
    build_comparison,
    check_state_roots,
    fastest_elapsed,
    speedup,
)
from sb_report.formatting import format_bytes, format_ms, format_speedup
from sb_report.render import (
    COUNT_COLUMNS,
    PERF_COLUMNS,
    count_rows,
    load_results,
    performance_rows,
    render_json,
    render_markdown,
    root_summary_lines,
)

__all__ = [
    "COUNT_COLUMNS",
    "PERF_COLUMNS",
    "Comparison",
    "ComparisonRow",
    "ReportItem",
    "RootCheck",
    "VERDICT_INCOMPLETE",
    "VERDICT_MATCH",
    "VERDICT_MISMATCH",
    "build_comparison",
    "check_state_roots",
    "count_rows",
    "fastest_elapsed",
    "format_bytes",
    "format_ms",
    "format_speedup",
    "load_results",
    "performance_rows",
    "render_json",
    "render_markdown",
    "root_summary_lines",
    "speedup",
]
