"""Shared helpers for statebench."""

from sb_common.api import ExecutionContext, SBError, configure_logging

__all__ = ["configure_logging", "ExecutionContext", "SBError"]
