"""
Deterministic workload generator.

The generator turns a WorkloadConfig into a JSONL operation stream. The
random source is seeded once per generator and consumed in a fixed order,
so two generators built from the same config write byte-identical files.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import TextIO

from sb_common.errors import WorkloadError
from sb_workload.distributions import slot_counts
from sb_workload.models import (
    ComputeRoot,
    CreateAccount,
    SetCode,
    SetStorage,
    Summary,
    WorkloadConfig,
    encode_operation,
)

logger = logging.getLogger(__name__)

WEI_PER_ETHER = 10**18
ADDRESS_BYTES = 20
WORD_BYTES = 32


class WorkloadGenerator:
    """Produce a deterministic operation stream from a WorkloadConfig."""

    def __init__(self, config: WorkloadConfig):
        self.config = config
        self._rng = random.Random(config.seed)
        self._written = 0

    def generate(self, stream: TextIO) -> Summary:
        """Write the workload to ``stream`` and return its Summary.

        Raises:
            WorkloadError: if an operation cannot be encoded or written.
        """
        cfg = self.config
        summary = Summary()

        for _ in range(cfg.accounts):
            self._emit(
                stream,
                CreateAccount(
                    address=self._random_address(),
                    balance=self._random_balance(1, 100),
                    nonce=self._rng.randrange(100),
                ),
            )
            summary.accounts_created += 1
            summary.total_operations += 1

        slots_per_contract = slot_counts(
            self._rng, cfg.contracts, cfg.min_slots, cfg.max_slots, cfg.distribution
        )

        for num_slots in slots_per_contract:
            address = self._random_address()
            balance = self._random_balance(0, 100)
            nonce = self._rng.randrange(100)
            code = self._random_code()

            self._emit(stream, CreateAccount(address=address, balance=balance, nonce=nonce))
            summary.total_operations += 1
            self._emit(stream, SetCode(address=address, code=code))
            summary.total_operations += 1

            for _ in range(num_slots):
                slot = self._random_hash()
                value = self._random_nonzero_hash()
                self._emit(stream, SetStorage(address=address, slot=slot, value=value))
                summary.total_operations += 1
                summary.storage_slots += 1

            summary.contracts_created += 1

        self._emit(stream, ComputeRoot())
        summary.total_operations += 1
        return summary

    def _emit(self, stream: TextIO, operation) -> None:
        try:
            stream.write(encode_operation(operation))
        except (OSError, TypeError, ValueError) as exc:
            raise WorkloadError(
                f"failed to write {operation.op} operation",
                context={"op": operation.op, "index": self._written},
                cause=exc,
            ) from exc
        self._written += 1

    def _random_address(self) -> str:
        return "0x" + self._rng.randbytes(ADDRESS_BYTES).hex()

    def _random_hash(self) -> str:
        return "0x" + self._rng.randbytes(WORD_BYTES).hex()

    def _random_nonzero_hash(self) -> str:
        buf = bytearray(self._rng.randbytes(WORD_BYTES))
        if not any(buf):
            buf[-1] = 1
        return "0x" + buf.hex()

    def _random_balance(self, min_ether: int, max_ether: int) -> str:
        ether = min_ether + self._rng.randrange(max_ether - min_ether + 1)
        return "0x" + (ether * WEI_PER_ETHER).to_bytes(WORD_BYTES, "big").hex()

    def _random_code(self) -> str:
        base = self.config.code_size
        size = base + self._rng.randrange(base) if base > 0 else 0
        return "0x" + self._rng.randbytes(size).hex()


def generate_to_path(config: WorkloadConfig, path: Path) -> Summary:
    """Generate a workload file at ``path``; a partial file is removed on error."""
    try:
        with path.open("w", encoding="utf-8", newline="\n") as handle:
            summary = WorkloadGenerator(config).generate(handle)
    except WorkloadError:
        path.unlink(missing_ok=True)
        raise
    except OSError as exc:
        path.unlink(missing_ok=True)
        raise WorkloadError(
            "failed to write workload file",
            context={"path": path},
            cause=exc,
        ) from exc

    logger.info(
        "workload generated",
        extra={
            "path": str(path),
            "operations": summary.total_operations,
            "accounts": summary.accounts_created,
            "contracts": summary.contracts_created,
            "storage_slots": summary.storage_slots,
        },
    )
    return summary
