"""External process capability used to run harness and build commands."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Mapping, Optional, Protocol

from sb_common.errors import HarnessError, HarnessTimeoutError

logger = logging.getLogger(__name__)

DRAIN_TIMEOUT_SECONDS = 5


@dataclass
class ProcessSpec:
    """Process execution specification."""

    argv: list[str]
    env_overrides: Mapping[str, str] = field(default_factory=dict)
    stdin_path: Optional[Path] = None
    cwd: Optional[Path] = None
    timeout_seconds: Optional[float] = None
    capture_output: bool = True

    def command_line(self) -> str:
        return " ".join(self.argv)


@dataclass
class ProcessOutcome:
    """Exit status and captured streams of a completed process."""

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    wall_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class ProcessLauncher(Protocol):
    """Strategy interface for spawning an external process to completion."""

    def run(self, spec: ProcessSpec) -> ProcessOutcome:
        ...


class SubprocessLauncher:
    """ProcessLauncher backed by subprocess.Popen."""

    def _popen_kwargs(self, spec: ProcessSpec, stdin: IO[Any] | None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "stdin": stdin if stdin is not None else subprocess.DEVNULL,
            "text": True,
            # Harness crash output may be arbitrary bytes.
            "encoding": "utf-8",
            "errors": "replace",
        }
        if spec.capture_output:
            kwargs["stdout"] = subprocess.PIPE
            kwargs["stderr"] = subprocess.PIPE
        else:
            # Uncaptured output goes to our stderr; stdout carries reports.
            kwargs["stdout"] = sys.stderr.fileno()
        if spec.env_overrides:
            kwargs["env"] = {**os.environ, **spec.env_overrides}
        if spec.cwd is not None:
            kwargs["cwd"] = spec.cwd
        return kwargs

    def run(self, spec: ProcessSpec) -> ProcessOutcome:
        """Run ``spec`` to completion.

        Raises:
            HarnessTimeoutError: the timeout expired; the process was killed.
            HarnessError: the executable could not be started.
        """
        logger.debug("Running command: %s", spec.command_line())
        stdin = spec.stdin_path.open("rb") if spec.stdin_path is not None else None
        try:
            started = time.monotonic()
            try:
                proc = subprocess.Popen(spec.argv, **self._popen_kwargs(spec, stdin))
            except OSError as exc:
                raise HarnessError(
                    f"failed to start {spec.argv[0]}",
                    context={"command": spec.command_line()},
                    cause=exc,
                ) from exc

            try:
                stdout, stderr = proc.communicate(timeout=spec.timeout_seconds)
            except subprocess.TimeoutExpired:
                logger.error(
                    "%s timed out after %s seconds. Terminating process.",
                    spec.argv[0],
                    spec.timeout_seconds,
                )
                _, stderr = self._stop(proc)
                raise HarnessTimeoutError(
                    f"timed out after {spec.timeout_seconds}s",
                    context={
                        "command": spec.command_line(),
                        "timeout_seconds": spec.timeout_seconds,
                        "stderr": stderr or "",
                    },
                ) from None
            return ProcessOutcome(
                argv=list(spec.argv),
                returncode=proc.returncode,
                stdout=stdout or "",
                stderr=stderr or "",
                wall_seconds=time.monotonic() - started,
            )
        finally:
            if stdin is not None:
                stdin.close()

    def _stop(self, proc: subprocess.Popen[str]) -> tuple[str, str]:
        logger.warning("Force killing %s", proc.args)
        proc.kill()
        try:
            stdout, stderr = proc.communicate(timeout=DRAIN_TIMEOUT_SECONDS)
        except subprocess.TimeoutExpired:
            # A grandchild still holds the pipes open; give up on the output.
            return "", ""
        return stdout or "", stderr or ""
