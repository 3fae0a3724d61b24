"""Reference harness implementing the statebench process protocol."""

from sb_harness.state import ProtocolError, StateStore

__all__ = ["ProtocolError", "StateStore"]
