"""Stable common API surface."""

from sb_common.context import ExecutionContext
from sb_common.errors import (
    BuildError,
    ConfigurationError,
    HarnessError,
    HarnessTimeoutError,
    OutputParseError,
    ReportError,
    RunInterrupted,
    SBError,
    WorkloadError,
    WorkloadFormatError,
    describe_error,
)
from sb_common.logging import configure_logging

__all__ = [
    "BuildError",
    "ConfigurationError",
    "ExecutionContext",
    "HarnessError",
    "HarnessTimeoutError",
    "OutputParseError",
    "ReportError",
    "RunInterrupted",
    "SBError",
    "WorkloadError",
    "WorkloadFormatError",
    "configure_logging",
    "describe_error",
]
