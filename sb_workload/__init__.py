"""Deterministic state workload generation for statebench."""

from sb_workload.api import Summary, WorkloadConfig, WorkloadGenerator, validate_workload

__all__ = ["Summary", "WorkloadConfig", "WorkloadGenerator", "validate_workload"]
