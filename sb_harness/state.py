"""In-memory account/storage state with a SHA-256 digest commitment."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path

from sb_workload.models import normalize_address, normalize_word

EMPTY_DIGEST = hashlib.sha256(b"").digest()
SNAPSHOT_FILE = "state.json"


class ProtocolError(Exception):
    """The operation stream violates the harness protocol."""


@dataclass
class Account:
    balance: int = 0
    nonce: int = 0
    code: bytes = b""
    storage: dict[bytes, bytes] = field(default_factory=dict)

    def storage_digest(self) -> bytes:
        if not self.storage:
            return EMPTY_DIGEST
        hasher = hashlib.sha256()
        for slot in sorted(self.storage):
            hasher.update(slot)
            hasher.update(self.storage[slot])
        return hasher.digest()

    def leaf(self, address: bytes) -> bytes:
        hasher = hashlib.sha256()
        hasher.update(address)
        hasher.update(self.balance.to_bytes(32, "big"))
        hasher.update(self.nonce.to_bytes(8, "big"))
        hasher.update(hashlib.sha256(self.code).digest())
        hasher.update(self.storage_digest())
        return hasher.digest()


def _decode_word(value: str) -> bytes:
    return bytes.fromhex(normalize_word(value)[2:])


class StateStore:
    """Accounts keyed by 20-byte address."""

    def __init__(self) -> None:
        self.accounts: dict[bytes, Account] = {}
        self.accounts_created = 0
        self.contracts_created = 0
        self.storage_slots = 0

    def _existing(self, address: str) -> Account:
        key = bytes.fromhex(normalize_address(address)[2:])
        account = self.accounts.get(key)
        if account is None:
            raise ProtocolError(f"unknown account {normalize_address(address)}")
        return account

    def create_account(self, address: str, balance: str | None, nonce: int) -> None:
        key = bytes.fromhex(normalize_address(address)[2:])
        if key in self.accounts:
            raise ProtocolError(f"account {normalize_address(address)} already exists")
        self.accounts[key] = Account(
            balance=int(balance, 16) if balance else 0,
            nonce=nonce,
        )
        self.accounts_created += 1

    def set_code(self, address: str, code: str) -> None:
        self._existing(address).code = bytes.fromhex(code[2:])
        self.contracts_created += 1

    def set_storage(self, address: str, slot: str, value: str) -> None:
        account = self._existing(address)
        slot_key = _decode_word(slot)
        word = _decode_word(value)
        if any(word):
            account.storage[slot_key] = word
        else:
            account.storage.pop(slot_key, None)
        self.storage_slots += 1

    def commit(self) -> str:
        """Return the state digest over all accounts in address order."""
        hasher = hashlib.sha256()
        for address in sorted(self.accounts):
            hasher.update(self.accounts[address].leaf(address))
        return "0x" + hasher.hexdigest()

    def persist(self, db_dir: Path, root: str) -> None:
        """Write a JSON snapshot of the committed state into ``db_dir``."""
        snapshot = {
            "root": root,
            "accounts": {
                "0x" + address.hex(): {
                    "balance": hex(account.balance),
                    "nonce": account.nonce,
                    "code": "0x" + account.code.hex(),
                    "storage": {
                        "0x" + slot.hex(): "0x" + value.hex()
                        for slot, value in sorted(account.storage.items())
                    },
                }
                for address, account in sorted(self.accounts.items())
            },
        }
        path = db_dir / SNAPSHOT_FILE
        with path.open("w", encoding="utf-8") as handle:
            json.dump(snapshot, handle)
            handle.flush()
