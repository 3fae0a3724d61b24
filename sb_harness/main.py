"""
Reference harness.

Reads a JSONL workload on stdin, applies it to an in-memory state store,
and on compute_root commits, persists into ``--db`` and prints one JSON
result line. Protocol violations exit with status 1.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import IO, Optional, Sequence

import psutil
from pydantic import ValidationError

from sb_harness.state import ProtocolError, StateStore
from sb_workload.models import (
    ComputeRoot,
    CreateAccount,
    SetCode,
    SetStorage,
    parse_operation,
)

CLIENT_NAME = "reference"


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def emit_result(store: StateStore, db_dir: Path, start: float, out: IO[str]) -> None:
    trie_start = time.monotonic()
    root = store.commit()
    trie_ms = _elapsed_ms(trie_start)

    db_start = time.monotonic()
    store.persist(db_dir, root)
    db_write_ms = _elapsed_ms(db_start)

    result = {
        "client": CLIENT_NAME,
        "state_root": root,
        "accounts_created": store.accounts_created,
        "contracts_created": store.contracts_created,
        "storage_slots": store.storage_slots,
        "elapsed_ms": _elapsed_ms(start),
        "trie_time_ms": trie_ms,
        "db_write_time_ms": db_write_ms,
        "peak_memory_bytes": psutil.Process(os.getpid()).memory_info().rss,
    }
    out.write(json.dumps(result) + "\n")
    out.flush()


def replay(lines: IO[str], store: StateStore, db_dir: Path, start: float, out: IO[str]) -> None:
    """Apply operations until compute_root; raises ProtocolError on violations."""
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            operation = parse_operation(line)
        except ValidationError as exc:
            raise ProtocolError(f"line {line_number}: invalid operation: {exc}") from exc

        if isinstance(operation, CreateAccount):
            store.create_account(operation.address, operation.balance, operation.nonce)
        elif isinstance(operation, SetCode):
            store.set_code(operation.address, operation.code)
        elif isinstance(operation, SetStorage):
            store.set_storage(operation.address, operation.slot, operation.value)
        elif isinstance(operation, ComputeRoot):
            emit_result(store, db_dir, start, out)
            return
    raise ProtocolError("no compute_root operation found")


def main(argv: Optional[Sequence[str]] = None) -> int:
    start = time.monotonic()
    parser = argparse.ArgumentParser(
        prog="statebench-reference-harness",
        description="Reference state harness speaking the statebench protocol.",
    )
    parser.add_argument("--db", required=True, type=Path, help="database directory")
    args = parser.parse_args(argv)

    if not args.db.is_dir():
        print(f"reference-harness: db dir {args.db} does not exist", file=sys.stderr)
        return 1

    try:
        replay(sys.stdin, StateStore(), args.db, start, sys.stdout)
    except ProtocolError as exc:
        print(f"reference-harness: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
