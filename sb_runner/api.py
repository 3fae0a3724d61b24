"""Stable runner API surface."""

from sb_runner.clients import (
    CLIENTS,
    KNOWN_CLIENTS,
    REFERENCE_CLIENT,
    ClientSpec,
    Invocation,
    build_client,
    needs_build,
    resolve_binary,
    resolve_invocation,
)
from sb_runner.disk import dir_size
from sb_runner.models import ClientFailure, ClientOutcome, ClientSuccess, Result
from sb_runner.process import ProcessLauncher, ProcessOutcome, ProcessSpec, SubprocessLauncher
from sb_runner.runner import HarnessRunner, parse_result
from sb_runner.session import BenchmarkSession, SessionResult
from sb_runner.settings import FailurePolicy, RunSettings, WorkloadSettings
from sb_runner.stop_token import StopToken

__all__ = [
    "CLIENTS",
    "KNOWN_CLIENTS",
    "REFERENCE_CLIENT",
    "BenchmarkSession",
    "ClientFailure",
    "ClientOutcome",
    "ClientSpec",
    "ClientSuccess",
    "FailurePolicy",
    "HarnessRunner",
    "Invocation",
    "ProcessLauncher",
    "ProcessOutcome",
    "ProcessSpec",
    "Result",
    "RunSettings",
    "SessionResult",
    "StopToken",
    "SubprocessLauncher",
    "WorkloadSettings",
    "build_client",
    "dir_size",
    "needs_build",
    "parse_result",
    "resolve_binary",
    "resolve_invocation",
]
