"""Environment variables recognised by statebench (``SB_*``)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_bool_env(value: str | None) -> bool | None:
    """Return None when unset, otherwise whether ``value`` is a truthy flag."""
    if value is None:
        return None
    return value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class LogEnv:
    """Logging overrides taken from ``SB_LOG_LEVEL``, ``SB_LOG_JSON`` and ``SB_LOG_FILE``."""

    level: str | None = None
    json: bool | None = None
    log_file: str | None = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "LogEnv":
        env = os.environ if environ is None else environ
        return cls(
            level=env.get("SB_LOG_LEVEL") or None,
            json=parse_bool_env(env.get("SB_LOG_JSON")),
            log_file=env.get("SB_LOG_FILE") or None,
        )
