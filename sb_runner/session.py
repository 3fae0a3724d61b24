"""
Benchmark session: generate one workload, build clients, run them in order.

Clients run strictly one at a time so every timing and memory figure is
taken with exclusive use of the host. Every client replays the same
workload file.
"""

from __future__ import annotations

import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from sb_common.context import ExecutionContext
from sb_common.errors import HarnessError, OutputParseError, RunInterrupted
from sb_runner.clients import (
    Invocation,
    build_client,
    needs_build,
    resolve_binary,
    resolve_invocation,
)
from sb_runner.models import ClientFailure, ClientOutcome, ClientSuccess, Result
from sb_runner.process import ProcessLauncher
from sb_runner.runner import HarnessRunner
from sb_runner.settings import FailurePolicy
from sb_runner.stop_token import StopToken
from sb_workload.generator import generate_to_path
from sb_workload.models import Summary
from sb_workload.reader import validate_workload


@dataclass
class SessionResult:
    """Workload summary and per-client outcomes in configured order."""

    workload_summary: Summary
    outcomes: list[ClientOutcome] = field(default_factory=list)

    @property
    def results(self) -> list[Result]:
        return [o.result for o in self.outcomes if isinstance(o, ClientSuccess)]

    @property
    def failures(self) -> list[ClientFailure]:
        return [o for o in self.outcomes if isinstance(o, ClientFailure)]


class BenchmarkSession:
    """Drive one benchmark experiment from an ExecutionContext."""

    def __init__(
        self,
        context: ExecutionContext,
        *,
        launcher: ProcessLauncher | None = None,
        stop_token: StopToken | None = None,
        seed_source: Callable[[], int] = time.time_ns,
    ) -> None:
        self.context = context
        self.settings = context.settings
        self._launcher = launcher
        self._stop_token = stop_token
        self._seed_source = seed_source
        self._logger = context.child_logger("session")

    def run(self) -> SessionResult:
        """Run every configured client and return their outcomes.

        Raises:
            ConfigurationError: no clients, or invalid workload settings.
            WorkloadError / WorkloadFormatError: the workload is unusable.
            BuildError: a client harness could not be built.
            HarnessError / OutputParseError: a client failed (fail-fast policy).
            RunInterrupted: a stop was requested before all clients ran.
        """
        self.settings.require_clients()
        self._logger.info("starting benchmark", extra=self.context.log_fields())

        stop_token = self._stop_token
        owns_token = stop_token is None
        if stop_token is None:
            stop_token = StopToken(stop_file=self.settings.stop_file)
        try:
            with self._workload() as (workload_path, summary):
                invocations = self._resolve_clients()
                outcomes = self._run_clients(workload_path, invocations, stop_token)
        finally:
            if owns_token:
                stop_token.restore()

        self._logger.info("benchmark complete", extra={"clients": len(outcomes)})
        return SessionResult(workload_summary=summary, outcomes=outcomes)

    @contextmanager
    def _workload(self) -> Iterator[tuple[Path, Summary]]:
        if self.settings.workload_path is not None:
            path = self.settings.workload_path
            summary = validate_workload(path)
            self._logger.info(
                "using pre-generated workload",
                extra={"path": str(path), "operations": summary.total_operations},
            )
            yield path, summary
            return

        seed = self.settings.workload.seed or self._seed_source()
        config = self.settings.workload.to_config(seed=seed)
        if config.seed != self.settings.workload.seed:
            self._logger.info("derived workload seed", extra={"seed": seed})

        keep = self.settings.keep_workload
        if keep is not None:
            keep.parent.mkdir(parents=True, exist_ok=True)
            yield keep, generate_to_path(config, keep)
            return

        fd, name = tempfile.mkstemp(prefix="statebench-workload-", suffix=".jsonl")
        os.close(fd)
        path = Path(name)
        try:
            summary = generate_to_path(config, path)
            yield path, summary
        finally:
            path.unlink(missing_ok=True)

    def _resolve_clients(self) -> dict[str, Invocation]:
        harnesses_dir = self.settings.harnesses_dir.resolve()
        invocations: dict[str, Invocation] = {}
        for client in self.settings.clients:
            binary = resolve_binary(harnesses_dir, client)
            if not self.settings.skip_build and needs_build(client):
                binary = build_client(harnesses_dir, client, launcher=self._launcher)
            invocations[client] = resolve_invocation(client, binary)
        return invocations

    def _run_clients(
        self,
        workload_path: Path,
        invocations: dict[str, Invocation],
        stop_token: StopToken,
    ) -> list[ClientOutcome]:
        db_root = self.settings.db_dir
        db_root.mkdir(parents=True, exist_ok=True)

        outcomes: list[ClientOutcome] = []
        for client in self.settings.clients:
            self._check_stop(stop_token, client)
            runner = HarnessRunner(
                client,
                invocations[client],
                launcher=self._launcher,
                logger=self.context.child_logger("runner"),
            )
            try:
                result = runner.run(
                    workload_path, db_root, timeout_seconds=self.settings.timeout_seconds
                )
            except (HarnessError, OutputParseError) as exc:
                if stop_token.should_stop():
                    raise RunInterrupted(
                        f"run interrupted while {client} was running",
                        context={"client": client, "reason": stop_token.reason},
                        cause=exc,
                    ) from exc
                if self.settings.failure_policy is FailurePolicy.FAIL_FAST:
                    raise
                self._logger.error(
                    "client failed", extra={"client": client, "error": str(exc)}
                )
                outcomes.append(ClientFailure.from_error(client, exc))
                continue
            outcomes.append(ClientSuccess(result))
        return outcomes

    def _check_stop(self, stop_token: StopToken, client: str) -> None:
        if stop_token.should_stop():
            raise RunInterrupted(
                f"run interrupted before {client}",
                context={"client": client, "reason": stop_token.reason},
            )
