"""Workload operation types, generation config and summary counters."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from sb_common.errors import ConfigurationError

OP_CREATE_ACCOUNT = "create_account"
OP_SET_CODE = "set_code"
OP_SET_STORAGE = "set_storage"
OP_COMPUTE_ROOT = "compute_root"

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{1,40}$"
WORD_PATTERN = r"^0x[0-9a-fA-F]{1,64}$"
BYTES_PATTERN = r"^0x(?:[0-9a-fA-F]{2})*$"

# Key order of the wire encoding; zero-valued optional fields are omitted.
WIRE_FIELDS = ("op", "address", "balance", "nonce", "code", "slot", "value")

DISTRIBUTIONS = ("power-law", "uniform", "exponential")


class _OperationBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for name in WIRE_FIELDS:
            value = getattr(self, name, None)
            if value is None or value == "" or (name == "nonce" and value == 0):
                continue
            payload[name] = value
        return payload


class CreateAccount(_OperationBase):
    op: Literal["create_account"] = OP_CREATE_ACCOUNT
    address: str = Field(pattern=ADDRESS_PATTERN)
    balance: str | None = Field(default=None, pattern=WORD_PATTERN)
    nonce: int = Field(default=0, ge=0, lt=2**64)


class SetCode(_OperationBase):
    op: Literal["set_code"] = OP_SET_CODE
    address: str = Field(pattern=ADDRESS_PATTERN)
    code: str = Field(pattern=BYTES_PATTERN)


class SetStorage(_OperationBase):
    op: Literal["set_storage"] = OP_SET_STORAGE
    address: str = Field(pattern=ADDRESS_PATTERN)
    slot: str = Field(pattern=WORD_PATTERN)
    value: str = Field(pattern=WORD_PATTERN)


class ComputeRoot(_OperationBase):
    op: Literal["compute_root"] = OP_COMPUTE_ROOT


Operation = Annotated[
    Union[CreateAccount, SetCode, SetStorage, ComputeRoot],
    Field(discriminator="op"),
]

_OPERATION_ADAPTER: TypeAdapter[Operation] = TypeAdapter(Operation)


def parse_operation(line: str | bytes) -> Operation:
    """Decode one workload line; raises pydantic.ValidationError on bad input."""
    return _OPERATION_ADAPTER.validate_json(line)


def encode_operation(operation: _OperationBase) -> str:
    """Encode an operation as one compact JSON line (newline included)."""
    return json.dumps(operation.to_wire(), separators=(",", ":")) + "\n"


def normalize_address(address: str) -> str:
    """Return the canonical 20-byte lowercase form of a hex address."""
    return "0x" + address[2:].lower().rjust(40, "0")


def normalize_word(word: str) -> str:
    """Return the canonical left-zero-padded 32-byte form of a hex word."""
    return "0x" + word[2:].lower().rjust(64, "0")


class WorkloadConfig(BaseModel):
    """Generation parameters. Every field is required."""

    model_config = ConfigDict(frozen=True)

    accounts: int = Field(ge=0, description="Number of EOA accounts to create")
    contracts: int = Field(ge=0, description="Number of contracts to create")
    min_slots: int = Field(ge=0, description="Minimum storage slots per contract")
    max_slots: int = Field(ge=0, description="Maximum storage slots per contract")
    distribution: str = Field(description="Slot distribution selector")
    seed: int = Field(description="Pseudo-random seed")
    code_size: int = Field(ge=0, description="Average contract code size in bytes")

    @model_validator(mode="after")
    def _validate_slot_bounds(self) -> "WorkloadConfig":
        if self.max_slots < self.min_slots:
            raise ValueError("max_slots must be greater than or equal to min_slots")
        return self

    @classmethod
    def create(cls, **values: Any) -> "WorkloadConfig":
        """Validate values, raising ConfigurationError instead of ValidationError."""
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(
                "invalid workload configuration",
                context={"errors": [err["msg"] for err in exc.errors()]},
                cause=exc,
            ) from exc


@dataclass
class Summary:
    """Operation counts derived from one workload stream."""

    total_operations: int = 0
    accounts_created: int = 0
    contracts_created: int = 0
    storage_slots: int = 0
