"""Read and structurally validate workload files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from sb_common.errors import WorkloadFormatError
from sb_workload.models import (
    ComputeRoot,
    CreateAccount,
    Operation,
    SetCode,
    SetStorage,
    Summary,
    normalize_address,
    parse_operation,
)


def iter_operations(path: Path) -> Iterator[tuple[int, Operation]]:
    """Yield ``(line_number, operation)`` pairs, skipping blank lines."""
    try:
        handle = path.open("r", encoding="utf-8")
    except OSError as exc:
        raise WorkloadFormatError(
            "cannot open workload file", context={"path": path}, cause=exc
        ) from exc

    with handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                yield line_number, parse_operation(line)
            except ValidationError as exc:
                raise WorkloadFormatError(
                    f"invalid operation on line {line_number}",
                    context={
                        "path": path,
                        "line": line_number,
                        "errors": [err["msg"] for err in exc.errors()],
                    },
                    cause=exc,
                ) from exc


def validate_workload(path: Path) -> Summary:
    """Check the operation stream contract and return its Summary.

    The stream must end with exactly one compute_root, create each address
    once, and only reference addresses that were created earlier.
    """
    summary = Summary()
    created: set[str] = set()
    with_code: set[str] = set()
    terminated_at: int | None = None

    for line_number, operation in iter_operations(path):
        if terminated_at is not None:
            raise WorkloadFormatError(
                "operation found after compute_root",
                context={"path": path, "line": line_number, "compute_root_line": terminated_at},
            )
        summary.total_operations += 1

        if isinstance(operation, ComputeRoot):
            terminated_at = line_number
            continue

        address = normalize_address(operation.address)
        if isinstance(operation, CreateAccount):
            if address in created:
                raise WorkloadFormatError(
                    "account created twice",
                    context={"path": path, "line": line_number, "address": address},
                )
            created.add(address)
            continue

        if address not in created:
            raise WorkloadFormatError(
                f"{operation.op} references unknown account",
                context={"path": path, "line": line_number, "address": address},
            )
        if isinstance(operation, SetCode):
            with_code.add(address)
        elif isinstance(operation, SetStorage):
            summary.storage_slots += 1

    if terminated_at is None:
        raise WorkloadFormatError(
            "workload does not end with compute_root", context={"path": path}
        )

    summary.contracts_created = len(with_code)
    summary.accounts_created = len(created) - len(with_code)
    return summary
