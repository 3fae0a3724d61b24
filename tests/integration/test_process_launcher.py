"""SubprocessLauncher against real child processes."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from sb_common.errors import HarnessError, HarnessTimeoutError, OutputParseError
from sb_runner.api import HarnessRunner, Invocation, ProcessSpec, SubprocessLauncher

pytestmark = pytest.mark.integration


def _python(code: str, **kwargs) -> ProcessSpec:
    return ProcessSpec(argv=[sys.executable, "-c", code], **kwargs)


def test_captures_streams_and_status() -> None:
    outcome = SubprocessLauncher().run(
        _python("import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)")
    )
    assert outcome.returncode == 3
    assert not outcome.succeeded
    assert outcome.stdout == "out\n"
    assert outcome.stderr == "err\n"
    assert outcome.wall_seconds > 0


def test_stdin_is_streamed_from_file(tmp_path: Path) -> None:
    source = tmp_path / "input.txt"
    source.write_text("line one\nline two\n")
    outcome = SubprocessLauncher().run(
        _python("import sys; print(len(sys.stdin.readlines()))", stdin_path=source)
    )
    assert outcome.stdout.strip() == "2"


def test_env_overrides_and_cwd(tmp_path: Path) -> None:
    outcome = SubprocessLauncher().run(
        _python(
            "import os; print(os.environ['SB_TEST_VALUE']); print(os.getcwd())",
            env_overrides={"SB_TEST_VALUE": "hello"},
            cwd=tmp_path,
        )
    )
    value, cwd = outcome.stdout.splitlines()
    assert value == "hello"
    assert Path(cwd).resolve() == tmp_path.resolve()


def test_timeout_kills_process() -> None:
    spec = _python(
        "import sys, time; print('starting', file=sys.stderr, flush=True); time.sleep(30)",
        timeout_seconds=2,
    )
    with pytest.raises(HarnessTimeoutError) as excinfo:
        SubprocessLauncher().run(spec)
    assert excinfo.value.context["timeout_seconds"] == 2
    assert "starting" in excinfo.value.context["stderr"]


def test_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(HarnessError, match="failed to start"):
        SubprocessLauncher().run(ProcessSpec(argv=[str(tmp_path / "nope")]))


def test_undecodable_stderr_is_replaced() -> None:
    outcome = SubprocessLauncher().run(
        _python(
            "import sys; sys.stderr.buffer.write(b'fatal \\xff\\xfe crash\\n'); sys.exit(3)"
        )
    )
    assert outcome.returncode == 3
    assert outcome.stderr.startswith("fatal ")
    assert "\ufffd" in outcome.stderr
    assert outcome.stderr.endswith("crash\n")


def test_harness_crash_with_binary_stderr_is_a_harness_error(tmp_path: Path) -> None:
    workload = tmp_path / "w.jsonl"
    workload.write_text('{"op":"compute_root"}\n')
    invocation = Invocation(
        command=(
            sys.executable,
            "-c",
            "import sys; sys.stderr.buffer.write(b'fatal \\xff\\xfe crash\\n'); sys.exit(3)",
        )
    )

    with pytest.raises(HarnessError) as excinfo:
        HarnessRunner("besu", invocation).run(workload, tmp_path / "db")

    assert excinfo.value.context["returncode"] == 3
    assert "crash" in excinfo.value.context["stderr"]


def test_binary_stdout_is_an_output_parse_error(tmp_path: Path) -> None:
    workload = tmp_path / "w.jsonl"
    workload.write_text('{"op":"compute_root"}\n')
    invocation = Invocation(
        command=(sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\x00{')")
    )

    with pytest.raises(OutputParseError) as excinfo:
        HarnessRunner("nethermind", invocation).run(workload, tmp_path / "db")

    assert "\ufffd" in excinfo.value.context["stdout"]
