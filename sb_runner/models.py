"""Harness result model and per-client outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from sb_common.errors import SBError


class Result(BaseModel):
    """One client's reported outcome plus the externally measured db size."""

    model_config = ConfigDict(frozen=True)

    client: str = Field(default="", description="Client identifier")
    state_root: str = Field(default="", description="Root commitment, compared as an exact string")
    accounts_created: int = Field(default=0, ge=0)
    contracts_created: int = Field(default=0, ge=0)
    storage_slots: int = Field(default=0, ge=0)
    elapsed_ms: int = Field(default=0, ge=0, description="Process start to result emission")
    trie_time_ms: int = Field(default=0, ge=0, description="In-memory commit step")
    db_write_time_ms: int = Field(default=0, ge=0, description="Durable persist step")
    peak_memory_bytes: int = Field(default=0, ge=0)
    db_size_bytes: int = Field(default=0, ge=0, description="Measured by the runner, never self-reported")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


@dataclass(frozen=True)
class ClientSuccess:
    result: Result

    @property
    def client(self) -> str:
        return self.result.client


@dataclass(frozen=True)
class ClientFailure:
    client: str
    error_type: str
    message: str

    @classmethod
    def from_error(cls, client: str, error: SBError) -> "ClientFailure":
        return cls(client=client, error_type=error.error_type, message=str(error))

    def to_dict(self) -> dict[str, Any]:
        return {"client": self.client, "error_type": self.error_type, "error": self.message}


ClientOutcome = Union[ClientSuccess, ClientFailure]
