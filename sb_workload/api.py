"""Stable workload API surface."""

from sb_workload.distributions import slot_counts
from sb_workload.generator import WorkloadGenerator, generate_to_path
from sb_workload.models import (
    DISTRIBUTIONS,
    ComputeRoot,
    CreateAccount,
    Operation,
    SetCode,
    SetStorage,
    Summary,
    WorkloadConfig,
    encode_operation,
    normalize_address,
    normalize_word,
    parse_operation,
)
from sb_workload.reader import iter_operations, validate_workload

__all__ = [
    "DISTRIBUTIONS",
    "ComputeRoot",
    "CreateAccount",
    "Operation",
    "SetCode",
    "SetStorage",
    "Summary",
    "WorkloadConfig",
    "WorkloadGenerator",
    "encode_operation",
    "generate_to_path",
    "iter_operations",
    "normalize_address",
    "normalize_word",
    "parse_operation",
    "slot_counts",
    "validate_workload",
]
