"""Execution context passed explicitly through a benchmark run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sb_runner.settings import RunSettings


@dataclass
class ExecutionContext:
    """Request-scoped dependencies for one benchmark invocation."""

    settings: RunSettings
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("statebench")
    )

    def child_logger(self, suffix: str) -> logging.Logger:
        return self.logger.getChild(suffix)

    def log_fields(self) -> dict[str, Any]:
        """Return the settings fields worth attaching to a start-of-run log."""
        workload = self.settings.workload
        return {
            "accounts": workload.accounts,
            "contracts": workload.contracts,
            "max_slots": workload.max_slots,
            "min_slots": workload.min_slots,
            "distribution": workload.distribution,
            "seed": workload.seed,
            "clients": list(self.settings.clients),
        }
