"""Benchmark run configuration (canonical definition for CLI and config files)."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from sb_common.errors import ConfigurationError
from sb_workload.models import WorkloadConfig

DEFAULT_TIMEOUT_SECONDS = 30 * 60


class FailurePolicy(str, Enum):
    """What to do when one client fails."""

    FAIL_FAST = "fail_fast"
    COLLECT = "collect"


class WorkloadSettings(BaseModel):
    """Workload parameters with CLI defaults."""

    accounts: int = Field(default=1000, ge=0, description="Number of EOA accounts to create")
    contracts: int = Field(default=100, ge=0, description="Number of contracts to create")
    max_slots: int = Field(default=10000, ge=0, description="Maximum storage slots per contract")
    min_slots: int = Field(default=1, ge=0, description="Minimum storage slots per contract")
    distribution: str = Field(
        default="power-law",
        description="Storage slot distribution: power-law, uniform, exponential",
    )
    seed: int = Field(default=0, description="Random seed (0 = derive from current time)")
    code_size: int = Field(default=1024, ge=0, description="Average contract code size in bytes")

    def to_config(self, seed: int | None = None) -> WorkloadConfig:
        """Return the strict generator config, optionally with a resolved seed."""
        values = self.model_dump()
        if seed is not None:
            values["seed"] = seed
        return WorkloadConfig.create(**values)


class RunSettings(BaseModel):
    """Main configuration for a benchmark run."""

    workload: WorkloadSettings = Field(default_factory=WorkloadSettings)
    clients: List[str] = Field(default_factory=list, description="Clients to benchmark, in run order")
    db_dir: Path = Field(default=Path("tmp"), description="Base directory for client databases")
    workload_path: Optional[Path] = Field(default=None, description="Pre-generated workload file (skip generation)")
    keep_workload: Optional[Path] = Field(default=None, description="Where to save the generated workload")
    harnesses_dir: Path = Field(default=Path("harnesses"), description="Path to the harnesses directory")
    skip_build: bool = Field(default=False, description="Skip building harness binaries")
    timeout_seconds: Optional[float] = Field(
        default=DEFAULT_TIMEOUT_SECONDS, ge=0, description="Per-client timeout; 0 or null disables it"
    )
    failure_policy: FailurePolicy = Field(default=FailurePolicy.FAIL_FAST)
    output_json: bool = Field(default=False, description="Output results as JSON instead of a table")
    stop_file: Optional[Path] = Field(default=None, description="Stop sentinel file checked between clients")

    @field_validator("clients", mode="before")
    @classmethod
    def _split_clients(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def _zero_disables_timeout(cls, value: Optional[float]) -> Optional[float]:
        return value or None

    def require_clients(self) -> None:
        if not self.clients:
            raise ConfigurationError(
                "at least one client must be specified via --clients"
            )
        duplicates = sorted({name for name in self.clients if self.clients.count(name) > 1})
        if duplicates:
            raise ConfigurationError(
                "clients must be listed once each",
                context={"duplicates": duplicates},
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunSettings":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(
                "invalid run configuration",
                context={"errors": [err["msg"] for err in exc.errors()]},
                cause=exc,
            ) from exc

    @classmethod
    def load(cls, filepath: Path) -> "RunSettings":
        """Load settings from a JSON or YAML file."""
        try:
            text = filepath.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                f"cannot read config file {filepath}", context={"path": filepath}, cause=exc
            ) from exc

        try:
            if filepath.suffix.lower() in {".yaml", ".yml"}:
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"cannot parse config file {filepath}", context={"path": filepath}, cause=exc
            ) from exc

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"config file {filepath} must contain a mapping", context={"path": filepath}
            )
        return cls.from_dict(data)

    def save(self, filepath: Path) -> None:
        filepath.write_text(self.model_dump_json(indent=2))

    def merged(self, overrides: Dict[str, Any]) -> "RunSettings":
        """Return a copy with non-None overrides applied; ``workload`` merges per field."""
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "workload":
                data["workload"].update({k: v for k, v in value.items() if v is not None})
            else:
                data[key] = value
        return self.from_dict(data)
