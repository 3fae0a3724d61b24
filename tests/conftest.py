from collections import defaultdict
from pathlib import Path

import pytest
from rich.console import Console
from rich.table import Table

from sb_common.context import ExecutionContext
from sb_runner.process import ProcessOutcome, ProcessSpec
from sb_runner.settings import RunSettings, WorkloadSettings


class FakeLauncher:
    """ProcessLauncher double that records specs and replays canned outcomes.

    ``responses`` maps the first argv element to a callable receiving the
    spec and returning a ProcessOutcome, or raising.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[ProcessSpec] = []

    def run(self, spec: ProcessSpec) -> ProcessOutcome:
        self.calls.append(spec)
        handler = self.responses.get(spec.argv[0])
        if handler is None:
            return ProcessOutcome(argv=list(spec.argv), returncode=0)
        return handler(spec)


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def small_workload_settings() -> WorkloadSettings:
    return WorkloadSettings(
        accounts=5,
        contracts=3,
        max_slots=4,
        min_slots=1,
        distribution="uniform",
        seed=42,
        code_size=8,
    )


@pytest.fixture
def reference_context(tmp_path: Path, small_workload_settings) -> ExecutionContext:
    """Context that runs the bundled reference harness without building."""
    settings = RunSettings(
        workload=small_workload_settings,
        clients=["reference"],
        db_dir=tmp_path / "db",
        skip_build=True,
        timeout_seconds=60,
    )
    return ExecutionContext(settings=settings)


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """
    Custom hook to print statistics by marker at the end of the test session.
    """
    _ = (exitstatus, config)
    known_markers = {
        "unit_workload", "unit_runner", "unit_harness",
        "unit_report", "unit_ui", "integration",
    }

    # stats is a dict like {'passed': [Report, ...], 'failed': [...]}
    marker_stats = defaultdict(lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0})

    for outcome in ["passed", "failed", "skipped"]:
        reports = terminalreporter.stats.get(outcome, [])
        for report in reports:
            # Only count the actual test call, or setup skips
            if report.when == "call" or (report.when == "setup" and report.outcome == "skipped"):
                duration = getattr(report, "duration", 0.0)
                for marker in known_markers:
                    if marker in report.keywords:
                        stats = marker_stats[marker]
                        stats[outcome] += 1
                        stats["total"] += 1
                        stats["duration"] += duration

    if not marker_stats:
        return

    console = Console()
    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")
    table.add_column("Avg (s)", justify="right", style="blue")

    for marker in sorted(marker_stats.keys()):
        stats = marker_stats[marker]
        if stats["total"] > 0:
            avg_duration = stats["duration"] / stats["total"]
            table.add_row(
                marker,
                str(stats["total"]),
                str(stats["passed"]),
                str(stats["failed"]),
                str(stats["skipped"]),
                f"{stats['duration']:.2f}",
                f"{avg_duration:.2f}",
            )

    console.print("\n")
    console.print(table)
