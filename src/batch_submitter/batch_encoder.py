"""
Calldata encoding for appendSequencerBatch().

The calldata body is a packed, big-endian byte string:

    shouldStartAtBatch      5 bytes
    totalElementsToAppend   3 bytes
    contextCount            3 bytes
    contexts                16 bytes each
    transactions            3-byte length + payload, repeated to the end

The full calldata is the 4-byte method selector followed by the body. There
is no padding and no checksum; only the fixed widths keep the format honest.
"""

import logging

from eth_typing import HexStr
from web3 import Web3

from .errors import FieldLengthMismatch, InvalidMethodId
from .models import AppendSequencerBatchParams, BatchContext
from .utils.hex_utility import (
    HexLike,
    add_0x,
    encode_hex,
    ensure_even,
    remove_0x,
    to_hex_str,
)

logger = logging.getLogger(__name__)

APPEND_SEQUENCER_BATCH_METHOD_ID = "appendSequencerBatch()"

SHOULD_START_AT_BATCH_BYTES = 5
TOTAL_ELEMENTS_TO_APPEND_BYTES = 3
CONTEXT_COUNT_BYTES = 3
TX_LENGTH_BYTES = 3
METHOD_ID_BYTES = 4

# Field order matters: this is the on-chain layout of one context
BATCH_CONTEXT_FIELDS: tuple[tuple[str, int], ...] = (
    ("num_sequenced_transactions", 3),
    ("num_subsequent_queue_transactions", 3),
    ("timestamp", 5),
    ("block_number", 5),
)
BATCH_CONTEXT_BYTES = sum(width for _, width in BATCH_CONTEXT_FIELDS)


class _Cursor:
    """Sequential reader over unprefixed hex text."""

    def __init__(self, data: str) -> None:
        self.data = data
        self.position = 0

    @property
    def remaining(self) -> int:
        """Remaining length in bytes."""
        return (len(self.data) - self.position) // 2

    def read(self, width: int, field: str) -> str:
        """Read width bytes as hex and advance."""
        if width > self.remaining:
            raise FieldLengthMismatch(field, width * 2, self.remaining * 2)
        start = self.position
        self.position += width * 2
        return self.data[start:self.position]

    def read_int(self, width: int, field: str) -> int:
        return int(self.read(width, field), 16)


class BatchEncoder:
    """Encoding and decoding of sequencer batch calldata."""

    @staticmethod
    def method_id() -> str:
        """
        Selector of appendSequencerBatch(): first 4 bytes of its keccak256.

        Returns:
            Unprefixed 8-character hex selector
        """
        return bytes(Web3.keccak(text=APPEND_SEQUENCER_BATCH_METHOD_ID))[:METHOD_ID_BYTES].hex()

    @staticmethod
    def encode_batch_context(context: BatchContext) -> str:
        """
        Encode one batch context as 16 bytes of unprefixed hex.

        Contexts carry no tag; their meaning comes from their position in
        the batch.

        Raises:
            FieldOverflow: If a field does not fit its width
        """
        return "".join(
            encode_hex(getattr(context, name), width, name)
            for name, width in BATCH_CONTEXT_FIELDS
        )

    @staticmethod
    def decode_batch_context(encoded: HexLike) -> BatchContext:
        """
        Decode a 16-byte batch context.

        Raises:
            FieldLengthMismatch: If the input is not exactly 16 bytes
        """
        hex_context = to_hex_str(encoded, "batch_context")
        if len(hex_context) != BATCH_CONTEXT_BYTES * 2:
            raise FieldLengthMismatch("batch_context", BATCH_CONTEXT_BYTES * 2, len(hex_context))

        cursor = _Cursor(hex_context)
        return BatchContext(**{
            name: cursor.read_int(width, name)
            for name, width in BATCH_CONTEXT_FIELDS
        })

    @staticmethod
    def encode_append_sequencer_batch(params: AppendSequencerBatchParams) -> HexStr:
        """
        Encode the calldata body of appendSequencerBatch().

        Transactions are framed, not interpreted: each one is expected to be
        a payload produced by the transaction coders.

        Args:
            params: Batch to encode

        Returns:
            0x-prefixed hex body without the method selector

        Raises:
            OddLengthByteString: If a transaction has an odd hex length
            FieldOverflow: If a header field or tx length does not fit
        """
        parts: list[str] = [
            encode_hex(params.should_start_at_batch, SHOULD_START_AT_BATCH_BYTES, "should_start_at_batch"),
            encode_hex(params.total_elements_to_append, TOTAL_ELEMENTS_TO_APPEND_BYTES, "total_elements_to_append"),
            encode_hex(len(params.contexts), CONTEXT_COUNT_BYTES, "context_count"),
        ]
        parts.extend(BatchEncoder.encode_batch_context(context) for context in params.contexts)

        for index, transaction in enumerate(params.transactions):
            field = f"transactions[{index}]"
            tx_hex = ensure_even(transaction, field)
            parts.append(encode_hex(len(tx_hex) // 2, TX_LENGTH_BYTES, f"{field}.length"))
            parts.append(tx_hex)

        encoded = add_0x("".join(parts))
        logger.debug(f"Encoded {params} into {len(encoded) // 2 - 1} bytes")
        return encoded

    @staticmethod
    def encode_append_sequencer_batch_calldata(params: AppendSequencerBatchParams) -> HexStr:
        """Encode the full calldata: method selector followed by the batch body."""
        body = remove_0x(BatchEncoder.encode_append_sequencer_batch(params))
        return add_0x(BatchEncoder.method_id() + body)

    @staticmethod
    def decode_append_sequencer_batch(
        calldata: HexLike,
        has_method_id: bool = False
    ) -> AppendSequencerBatchParams:
        """
        Decode appendSequencerBatch() calldata back into batch params.

        Args:
            calldata: Encoded batch, as bytes or hex
            has_method_id: Whether calldata starts with the 4-byte selector

        Returns:
            Decoded batch; transactions are returned as 0x-prefixed hex

        Raises:
            InvalidMethodId: If the selector is present but wrong
            FieldLengthMismatch: If a section is truncated
            OddLengthByteString: If the calldata has an odd hex length
        """
        cursor = _Cursor(ensure_even(calldata, "calldata"))

        if has_method_id:
            selector = cursor.read(METHOD_ID_BYTES, "method_id")
            if selector != BatchEncoder.method_id():
                raise InvalidMethodId(BatchEncoder.method_id(), selector)

        should_start_at_batch = cursor.read_int(SHOULD_START_AT_BATCH_BYTES, "should_start_at_batch")
        total_elements_to_append = cursor.read_int(TOTAL_ELEMENTS_TO_APPEND_BYTES, "total_elements_to_append")
        context_count = cursor.read_int(CONTEXT_COUNT_BYTES, "context_count")

        contexts = tuple(
            BatchEncoder.decode_batch_context(cursor.read(BATCH_CONTEXT_BYTES, f"contexts[{index}]"))
            for index in range(context_count)
        )

        transactions: list[str] = []
        while cursor.remaining > 0:
            field = f"transactions[{len(transactions)}]"
            length = cursor.read_int(TX_LENGTH_BYTES, f"{field}.length")
            transactions.append(add_0x(cursor.read(length, field)))

        return AppendSequencerBatchParams(
            should_start_at_batch=should_start_at_batch,
            total_elements_to_append=total_elements_to_append,
            contexts=contexts,
            transactions=tuple(transactions),
        )
