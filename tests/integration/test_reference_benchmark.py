"""End-to-end runs through the bundled reference harness."""

from __future__ import annotations

import json
import logging
import os
import stat
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sb_harness.state import SNAPSHOT_FILE
from sb_runner.api import BenchmarkSession, ClientSuccess, StopToken
from sb_ui.cli.main import app

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _session(context) -> BenchmarkSession:
    return BenchmarkSession(context, stop_token=StopToken(enable_signals=False))


def test_reference_session_produces_result(reference_context) -> None:
    result = _session(reference_context).run()

    (outcome,) = result.outcomes
    assert isinstance(outcome, ClientSuccess)
    reported = outcome.result
    assert reported.client == "reference"
    assert reported.state_root.startswith("0x")
    assert reported.accounts_created == result.workload_summary.accounts_created + result.workload_summary.contracts_created
    assert reported.contracts_created == result.workload_summary.contracts_created
    assert reported.storage_slots == result.workload_summary.storage_slots

    db_dir = reference_context.settings.db_dir / "reference"
    assert reported.db_size_bytes == (db_dir / SNAPSHOT_FILE).stat().st_size
    assert reported.db_size_bytes > 0


def test_same_seed_same_root(reference_context) -> None:
    first = _session(reference_context).run().results[0]
    second = _session(reference_context).run().results[0]
    assert first.state_root == second.state_root


def _write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!{sys.executable}\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return path


def _run_cli(tmp_path: Path, *extra: str):
    return runner.invoke(
        app,
        [
            "--headless",
            "run",
            "--accounts", "6",
            "--contracts", "3",
            "--max-slots", "5",
            "--seed", "11",
            "--code-size", "8",
            "--skip-build",
            "--db-dir", str(tmp_path / "db"),
            "--harnesses-dir", str(tmp_path / "harnesses"),
            *extra,
        ],
    )


def test_cli_markdown_report(tmp_path: Path) -> None:
    result = _run_cli(tmp_path, "--clients", "reference")
    assert result.exit_code == 0, result.output
    assert "## Benchmark Results" in result.output
    assert "State roots: **all match**" in result.output
    assert "| reference |" in result.output


def test_cli_json_report_and_kept_workload(tmp_path: Path) -> None:
    keep = tmp_path / "workload.jsonl"
    result = _run_cli(tmp_path, "--clients", "reference", "--json", "--keep-workload", str(keep))
    assert result.exit_code == 0, result.output
    assert '"client": "reference"' in result.output
    assert '"db_size_bytes": ' in result.output
    assert keep.exists()

    replay = runner.invoke(
        app,
        [
            "--headless",
            "run",
            "--clients", "reference",
            "--workload", str(keep),
            "--db-dir", str(tmp_path / "db2"),
        ],
    )
    assert replay.exit_code == 0, replay.output
    snapshot = json.loads((tmp_path / "db2" / "reference" / SNAPSHOT_FILE).read_text())
    first = json.loads((tmp_path / "db" / "reference" / SNAPSHOT_FILE).read_text())
    assert snapshot["root"] == first["root"]


def test_cli_mismatch_exit_code(tmp_path: Path) -> None:
    _write_script(
        tmp_path / "harnesses" / "fixed" / "fixed-harness",
        "import json, sys\n"
        "sys.stdin.read()\n"
        "print(json.dumps({'state_root': '0xdead', 'elapsed_ms': 5}))",
    )
    result = _run_cli(tmp_path, "--clients", "reference,fixed", "--fail-on-mismatch")
    assert result.exit_code == 2, result.output
    assert "State roots: **MISMATCH**" in result.output
    assert "  - fixed: 0xdead" in result.output


def test_cli_keep_going_marks_failures(tmp_path: Path) -> None:
    result = _run_cli(tmp_path, "--clients", "ghost,reference", "--keep-going")
    assert result.exit_code == 1
    assert "| ghost | FAILED |" in result.output
    assert "State roots: **incomplete**" in result.output
    assert "| reference |" in result.output
    assert "Failures:" in result.output


def test_cli_timeout_is_reported(tmp_path: Path) -> None:
    _write_script(
        tmp_path / "harnesses" / "sleepy" / "sleepy-harness",
        "import time\ntime.sleep(30)",
    )
    result = _run_cli(tmp_path, "--clients", "sleepy", "--timeout", "1")
    assert result.exit_code == 1
    assert "timed out" in result.output


def test_cli_harness_failure_shows_stderr(tmp_path: Path) -> None:
    _write_script(
        tmp_path / "harnesses" / "broken" / "broken-harness",
        "import sys\nprint('panic: unsupported op', file=sys.stderr)\nsys.exit(4)",
    )
    result = _run_cli(tmp_path, "--clients", "broken")
    assert result.exit_code == 1
    assert "exit status 4" in result.output
    assert "panic: unsupported op" in result.output


@pytest.mark.skipif(os.name != "posix", reason="relies on executable scripts")
def test_stop_file_prevents_next_client(tmp_path: Path) -> None:
    stop = tmp_path / "STOP"
    _write_script(
        tmp_path / "harnesses" / "stopper" / "stopper-harness",
        "import json, pathlib, sys\n"
        f"pathlib.Path({str(stop)!r}).touch()\n"
        "sys.stdin.read()\n"
        "print(json.dumps({'state_root': '0x1'}))",
    )
    result = _run_cli(tmp_path, "--clients", "stopper,reference", "--stop-file", str(stop))
    assert result.exit_code == 1
    assert "interrupted before reference" in result.output
    assert not (tmp_path / "db" / "reference").exists()
