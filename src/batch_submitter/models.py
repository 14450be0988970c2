#!/usr/bin/env python3
"""Data models for the sequencer batch submitter.

This module provides immutable data classes for the transaction payloads
carried inside a sequencer batch, the batch contexts and the batch itself.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .utils.hex_utility import add_0x, to_hex_str


class TxType(IntEnum):
    """Tag byte written at the start of every encoded transaction payload."""

    EIP155 = 0
    CREATE_EOA = 1


@dataclass(frozen=True, slots=True)
class Signature:
    """ECDSA signature components.

    Attributes:
        r: 32-byte hex value
        s: 32-byte hex value
        v: Recovery id, encoded as a single byte
    """

    r: str
    s: str
    v: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", add_0x(to_hex_str(self.r, "r")))
        object.__setattr__(self, "s", add_0x(to_hex_str(self.s, "s")))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"r": self.r, "s": self.s, "v": self.v}


@dataclass(frozen=True, slots=True)
class CreateEOATxData:
    """A transaction that deploys an EOA proxy from a signed message hash.

    Attributes:
        sig: Signature over the message hash
        message_hash: 32-byte hex message hash
    """

    sig: Signature
    message_hash: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "message_hash", add_0x(to_hex_str(self.message_hash, "message_hash")))

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"CreateEOATxData(message_hash={self.message_hash[:10]}...)"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"sig": self.sig.to_dict(), "message_hash": self.message_hash}


@dataclass(frozen=True, slots=True)
class EIP155TxData:
    """A standard signed call or transfer.

    Attributes:
        sig: Transaction signature
        gas_limit: Gas limit, fits in 2 bytes
        gas_price: Gas price, fits in 1 byte
        nonce: Sender nonce, fits in 3 bytes
        target: 20-byte hex address of the callee
        data: Even-length hex calldata of arbitrary length
    """

    sig: Signature
    gas_limit: int
    gas_price: int
    nonce: int
    target: str
    data: str

    def __post_init__(self) -> None:
        # Store lowercase 0x-prefixed hex, the form the decoder produces
        object.__setattr__(self, "target", add_0x(to_hex_str(self.target, "target")))
        object.__setattr__(self, "data", add_0x(to_hex_str(self.data, "data")))

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"EIP155TxData(target={self.target[:10]}..., "
            f"nonce={self.nonce}, "
            f"data_len={len(self.data.removeprefix('0x')) // 2})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "sig": self.sig.to_dict(),
            "gas_limit": self.gas_limit,
            "gas_price": self.gas_price,
            "nonce": self.nonce,
            "target": self.target,
            "data": self.data,
        }


TxData = EIP155TxData | CreateEOATxData


@dataclass(frozen=True, slots=True)
class BatchContext:
    """A run of sequencer transactions followed by queue transactions.

    Attributes:
        num_sequenced_transactions: Sequencer transactions in the run (3 bytes)
        num_subsequent_queue_transactions: Queue transactions after them (3 bytes)
        timestamp: L1 timestamp the run is anchored to (5 bytes)
        block_number: L1 block number the run is anchored to (5 bytes)
    """

    num_sequenced_transactions: int
    num_subsequent_queue_transactions: int
    timestamp: int
    block_number: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "num_sequenced_transactions": self.num_sequenced_transactions,
            "num_subsequent_queue_transactions": self.num_subsequent_queue_transactions,
            "timestamp": self.timestamp,
            "block_number": self.block_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BatchContext":
        return cls(
            num_sequenced_transactions=int(data["num_sequenced_transactions"]),
            num_subsequent_queue_transactions=int(data["num_subsequent_queue_transactions"]),
            timestamp=int(data["timestamp"]),
            block_number=int(data["block_number"]),
        )


@dataclass(frozen=True, slots=True)
class AppendSequencerBatchParams:
    """Arguments of an appendSequencerBatch() call.

    The totals are not cross-checked against the list sizes; keeping them
    consistent is up to whoever builds the batch.

    Attributes:
        should_start_at_batch: Index the batch must start at (5 bytes)
        total_elements_to_append: Number of elements appended (3 bytes)
        contexts: Ordered batch contexts
        transactions: Ordered, already-encoded transaction payloads (hex)
    """

    should_start_at_batch: int
    total_elements_to_append: int
    contexts: tuple[BatchContext, ...]
    transactions: tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so the value stays immutable
        object.__setattr__(self, "contexts", tuple(self.contexts))
        object.__setattr__(self, "transactions", tuple(self.transactions))

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"AppendSequencerBatchParams(start={self.should_start_at_batch}, "
            f"elements={self.total_elements_to_append}, "
            f"contexts={len(self.contexts)}, "
            f"transactions={len(self.transactions)})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "should_start_at_batch": self.should_start_at_batch,
            "total_elements_to_append": self.total_elements_to_append,
            "contexts": [context.to_dict() for context in self.contexts],
            "transactions": list(self.transactions),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppendSequencerBatchParams":
        """Build batch params from a dictionary produced by to_dict().

        Raises:
            KeyError: If a required key is missing
        """
        return cls(
            should_start_at_batch=int(data["should_start_at_batch"]),
            total_elements_to_append=int(data["total_elements_to_append"]),
            contexts=tuple(BatchContext.from_dict(item) for item in data["contexts"]),
            transactions=tuple(data["transactions"]),
        )
