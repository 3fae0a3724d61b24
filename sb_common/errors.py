"""Shared error taxonomy for statebench."""

from __future__ import annotations

from typing import Any, Mapping


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class SBError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__


class ConfigurationError(SBError):
    """Failure due to invalid configuration."""


class WorkloadError(SBError):
    """Failure while generating a workload file."""


class WorkloadFormatError(SBError):
    """A workload file does not satisfy the operation stream contract."""


class BuildError(SBError):
    """Failure building or locating a client harness binary."""


class HarnessError(SBError):
    """A harness process failed to complete the protocol round-trip."""


class HarnessTimeoutError(HarnessError):
    """A harness process exceeded its timeout and was killed."""


class OutputParseError(SBError):
    """Harness standard output could not be decoded as a Result."""


class ReportError(SBError):
    """Failure building or rendering a comparison report."""


class RunInterrupted(SBError):
    """The benchmark session was stopped before all clients ran."""


def describe_error(error: BaseException) -> str:
    """Render an error and its diagnostic context as multi-line text."""
    lines = [str(error)]
    context = getattr(error, "context", None) or {}
    for key in ("client", "returncode", "timeout_seconds", "cause"):
        if key in context and context[key] not in (None, ""):
            lines.append(f"{key}: {context[key]}")
    for key in ("stderr", "stdout"):
        text = context.get(key)
        if isinstance(text, str) and text.strip():
            lines.append(f"{key}:\n{text.rstrip()}")
    cause = error.__cause__
    if cause is not None and "cause" not in context:
        lines.append(f"cause: {cause}")
    return "\n".join(lines)
