"""Run one harness protocol round-trip and produce a validated Result."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from sb_common.errors import HarnessError, HarnessTimeoutError, OutputParseError
from sb_runner.clients import Invocation
from sb_runner.disk import dir_size
from sb_runner.models import Result
from sb_runner.process import ProcessLauncher, ProcessSpec, SubprocessLauncher

logger = logging.getLogger(__name__)


def parse_result(client: str, stdout: str) -> Result:
    """Decode harness stdout as exactly one JSON Result object.

    An empty ``client`` field is filled with the configured client name.

    Raises:
        OutputParseError: stdout is not a single JSON object matching Result.
    """
    text = stdout.strip()
    try:
        payload, end = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as exc:
        raise OutputParseError(
            f"{client}: output is not valid JSON",
            context={"client": client, "stdout": stdout},
            cause=exc,
        ) from exc

    if text[end:].strip():
        raise OutputParseError(
            f"{client}: output contains more than one JSON value",
            context={"client": client, "stdout": stdout},
        )
    if not isinstance(payload, dict):
        raise OutputParseError(
            f"{client}: output is not a JSON object",
            context={"client": client, "stdout": stdout},
        )

    try:
        result = Result.model_validate(payload)
    except ValidationError as exc:
        raise OutputParseError(
            f"{client}: output does not match the result schema",
            context={
                "client": client,
                "stdout": stdout,
                "errors": [err["msg"] for err in exc.errors()],
            },
            cause=exc,
        ) from exc

    if not result.client:
        result = result.model_copy(update={"client": client})
    return result


class HarnessRunner:
    """Launches a single client harness and collects its Result."""

    def __init__(
        self,
        name: str,
        invocation: Invocation,
        *,
        launcher: ProcessLauncher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.name = name
        self.invocation = invocation
        self._launcher = launcher or SubprocessLauncher()
        self._logger = logger or logging.getLogger(__name__)

    def prepare_db_dir(self, db_root: Path) -> Path:
        """Recreate the client's exclusive database directory under ``db_root``."""
        db_dir = db_root / self.name
        try:
            if db_dir.exists():
                shutil.rmtree(db_dir)
            db_dir.mkdir(parents=True)
        except OSError as exc:
            raise HarnessError(
                f"cannot prepare db dir {db_dir}",
                context={"client": self.name, "db_dir": db_dir},
                cause=exc,
            ) from exc
        return db_dir

    def run(
        self,
        workload_path: Path,
        db_root: Path,
        timeout_seconds: Optional[float] = None,
    ) -> Result:
        """Execute the harness against ``workload_path``.

        Raises:
            HarnessTimeoutError: the harness exceeded ``timeout_seconds``.
            HarnessError: the harness exited non-zero (stderr attached).
            OutputParseError: stdout could not be decoded (stdout attached).
        """
        db_dir = self.prepare_db_dir(db_root)
        spec = ProcessSpec(
            argv=self.invocation.argv(db_dir),
            env_overrides=dict(self.invocation.env),
            stdin_path=workload_path,
            timeout_seconds=timeout_seconds,
        )

        self._logger.info(
            "starting harness",
            extra={"client": self.name, "binary": spec.argv[0], "db_dir": str(db_dir)},
        )

        try:
            outcome = self._launcher.run(spec)
        except HarnessTimeoutError as exc:
            raise HarnessTimeoutError(
                f"harness {self.name} timed out after {timeout_seconds}s",
                context={"client": self.name, **exc.context},
                cause=exc,
            ) from exc
        except HarnessError as exc:
            raise HarnessError(
                f"harness {self.name} failed to start",
                context={"client": self.name, **exc.context},
                cause=exc,
            ) from exc

        if not outcome.succeeded:
            raise HarnessError(
                f"harness {self.name} failed: exit status {outcome.returncode}",
                context={
                    "client": self.name,
                    "returncode": outcome.returncode,
                    "stderr": outcome.stderr,
                },
            )

        self._logger.info(
            "harness finished",
            extra={"client": self.name, "wall_time_s": round(outcome.wall_seconds, 3)},
        )

        result = parse_result(self.name, outcome.stdout)

        db_size = 0
        try:
            db_size = dir_size(db_dir)
        except OSError as exc:
            self._logger.warning(
                "failed to measure db size",
                extra={"client": self.name, "error": str(exc)},
            )

        return result.model_copy(update={"db_size_bytes": db_size})
