from __future__ import annotations

import json
from pathlib import Path

import pytest

from sb_harness.state import SNAPSHOT_FILE, ProtocolError, StateStore

pytestmark = pytest.mark.unit_harness

A = "0x" + "aa" * 20
B = "0x" + "bb" * 20


def _store() -> StateStore:
    store = StateStore()
    store.create_account(A, "0x" + "00" * 31 + "05", 1)
    store.create_account(B, None, 0)
    store.set_code(B, "0x6001")
    store.set_storage(B, "0x01", "0x02")
    return store


def test_root_is_deterministic() -> None:
    assert _store().commit() == _store().commit()
    assert _store().commit().startswith("0x")
    assert len(_store().commit()) == 66


def test_root_is_independent_of_creation_order() -> None:
    other = StateStore()
    other.create_account(B, None, 0)
    other.create_account(A, "0x05", 1)
    other.set_storage(B, "0x" + "00" * 31 + "01", "0x02")
    other.set_code(B, "0x6001")
    assert other.commit() == _store().commit()


def test_root_changes_with_state() -> None:
    store = _store()
    before = store.commit()
    store.set_storage(B, "0x03", "0x04")
    assert store.commit() != before


def test_zero_value_deletes_slot() -> None:
    store = _store()
    store.set_storage(B, "0x01", "0x00")
    empty = StateStore()
    empty.create_account(A, "0x05", 1)
    empty.create_account(B, None, 0)
    empty.set_code(B, "0x6001")
    assert store.commit() == empty.commit()
    assert store.storage_slots == 2


def test_counters() -> None:
    store = _store()
    assert (store.accounts_created, store.contracts_created, store.storage_slots) == (2, 1, 1)


def test_duplicate_create_is_rejected() -> None:
    store = _store()
    with pytest.raises(ProtocolError, match="already exists"):
        store.create_account(A, None, 0)


def test_unknown_account_is_rejected() -> None:
    with pytest.raises(ProtocolError, match="unknown account"):
        StateStore().set_code(A, "0x00")


def test_persist_writes_snapshot(tmp_path: Path) -> None:
    store = _store()
    root = store.commit()
    store.persist(tmp_path, root)
    snapshot = json.loads((tmp_path / SNAPSHOT_FILE).read_text())
    assert snapshot["root"] == root
    assert snapshot["accounts"][A]["nonce"] == 1
    assert snapshot["accounts"][B]["code"] == "0x6001"
