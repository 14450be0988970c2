"""
Encoders and decoders for the transaction payloads carried in a batch.

Each transaction type is described by one TxLayout: an ordered list of
fields with their byte widths. Encoding walks the layout and concatenates
the fields; decoding walks the same layout and slices at offsets derived
from the widths, so the two directions cannot drift apart.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eth_typing import HexStr

from .errors import FieldLengthMismatch, InvalidTransactionTag, OddLengthByteString
from .models import CreateEOATxData, EIP155TxData, Signature, TxData, TxType
from .utils.hex_utility import (
    HexLike,
    add_0x,
    encode_hex,
    ensure_even,
    to_hex_str,
    to_verified_bytes,
)

logger = logging.getLogger(__name__)


class FieldKind(Enum):
    """How a layout field is written and read back."""

    TAG = "tag"  # tx type byte
    EXACT = "exact"  # caller-supplied hex, length checked
    NUMERIC = "numeric"  # integer, zero-padded to width
    RAW = "raw"  # variable-length tail, passed through


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    width: int | None  # None only for a trailing RAW field
    kind: FieldKind


@dataclass(frozen=True, slots=True)
class TxLayout:
    """Byte layout of one transaction type."""

    tx_type: TxType
    fields: tuple[FieldSpec, ...]

    @property
    def positions(self) -> dict[str, tuple[int, int | None]]:
        """Absolute (start, end) byte offsets of every field."""
        positions: dict[str, tuple[int, int | None]] = {}
        offset = 0
        for spec in self.fields:
            if spec.width is None:
                positions[spec.name] = (offset, None)
            else:
                positions[spec.name] = (offset, offset + spec.width)
                offset += spec.width
        return positions

    @property
    def fixed_size(self) -> int:
        """Size in bytes of all fixed-width fields."""
        return sum(spec.width for spec in self.fields if spec.width is not None)

    @property
    def has_tail(self) -> bool:
        return any(spec.width is None for spec in self.fields)


_TX_TYPE = FieldSpec("tx_type", 1, FieldKind.TAG)
_SIGNATURE = (
    FieldSpec("r", 32, FieldKind.EXACT),
    FieldSpec("s", 32, FieldKind.EXACT),
    FieldSpec("v", 1, FieldKind.NUMERIC),
)

EIP155_LAYOUT = TxLayout(
    tx_type=TxType.EIP155,
    fields=(
        _TX_TYPE,
        *_SIGNATURE,
        FieldSpec("gas_limit", 2, FieldKind.NUMERIC),
        FieldSpec("gas_price", 1, FieldKind.NUMERIC),
        FieldSpec("nonce", 3, FieldKind.NUMERIC),
        FieldSpec("target", 20, FieldKind.EXACT),
        FieldSpec("data", None, FieldKind.RAW),
    ),
)

CREATE_EOA_LAYOUT = TxLayout(
    tx_type=TxType.CREATE_EOA,
    fields=(
        _TX_TYPE,
        *_SIGNATURE,
        FieldSpec("message_hash", 32, FieldKind.EXACT),
    ),
)


def _encode_fields(layout: TxLayout, values: dict[str, Any]) -> HexStr:
    parts: list[str] = []
    for spec in layout.fields:
        match spec.kind:
            case FieldKind.TAG:
                parts.append(encode_hex(int(layout.tx_type), 1, spec.name))
            case FieldKind.EXACT:
                parts.append(to_verified_bytes(values[spec.name], spec.width, spec.name))
            case FieldKind.NUMERIC:
                parts.append(encode_hex(values[spec.name], spec.width, spec.name))
            case FieldKind.RAW:
                parts.append(ensure_even(values[spec.name], spec.name))
    return add_0x("".join(parts))


def _read_tag(payload: str) -> int:
    if len(payload) < 2:
        raise FieldLengthMismatch("tx_type", 2, len(payload))
    return int(payload[:2], 16)


def _decode_fields(layout: TxLayout, payload: HexLike) -> dict[str, Any]:
    hex_payload = to_hex_str(payload, "payload")

    tag = _read_tag(hex_payload)
    if tag != layout.tx_type:
        raise InvalidTransactionTag(int(layout.tx_type), tag)

    if len(hex_payload) % 2 != 0:
        raise OddLengthByteString("payload", len(hex_payload))
    expected = layout.fixed_size * 2
    too_short = len(hex_payload) < expected
    if too_short or (not layout.has_tail and len(hex_payload) != expected):
        raise FieldLengthMismatch("payload", expected, len(hex_payload))

    positions = layout.positions
    values: dict[str, Any] = {}
    for spec in layout.fields:
        start, end = positions[spec.name]
        chunk = hex_payload[start * 2:] if end is None else hex_payload[start * 2:end * 2]
        match spec.kind:
            case FieldKind.TAG:
                continue
            case FieldKind.NUMERIC:
                values[spec.name] = int(chunk, 16)
            case FieldKind.EXACT | FieldKind.RAW:
                values[spec.name] = add_0x(chunk)
    return values


def encode_eip155_tx_data(tx: EIP155TxData) -> HexStr:
    """
    Encode an EIP155 transaction payload.

    Layout: [1B tag=0][32B r][32B s][1B v][2B gasLimit][1B gasPrice]
    [3B nonce][20B target][data...]

    Raises:
        FieldLengthMismatch: If r, s or target has the wrong width
        FieldOverflow: If a numeric field does not fit its width
        OddLengthByteString: If data has an odd number of hex characters
    """
    return _encode_fields(EIP155_LAYOUT, {
        "r": tx.sig.r,
        "s": tx.sig.s,
        "v": tx.sig.v,
        "gas_limit": tx.gas_limit,
        "gas_price": tx.gas_price,
        "nonce": tx.nonce,
        "target": tx.target,
        "data": tx.data,
    })


def decode_eip155_tx_data(payload: HexLike) -> EIP155TxData:
    """
    Decode an EIP155 transaction payload.

    Raises:
        InvalidTransactionTag: If the tag byte is not TxType.EIP155
        FieldLengthMismatch: If the payload is shorter than the fixed fields
    """
    values = _decode_fields(EIP155_LAYOUT, payload)
    return EIP155TxData(
        sig=Signature(r=values["r"], s=values["s"], v=values["v"]),
        gas_limit=values["gas_limit"],
        gas_price=values["gas_price"],
        nonce=values["nonce"],
        target=values["target"],
        data=values["data"],
    )


def encode_create_eoa_tx_data(tx: CreateEOATxData) -> HexStr:
    """
    Encode a CreateEOA transaction payload.

    Layout: [1B tag=1][32B r][32B s][1B v][32B messageHash]
    """
    return _encode_fields(CREATE_EOA_LAYOUT, {
        "r": tx.sig.r,
        "s": tx.sig.s,
        "v": tx.sig.v,
        "message_hash": tx.message_hash,
    })


def decode_create_eoa_tx_data(payload: HexLike) -> CreateEOATxData:
    """
    Decode a CreateEOA transaction payload.

    Raises:
        InvalidTransactionTag: If the tag byte is not TxType.CREATE_EOA
        FieldLengthMismatch: If the payload is not exactly 98 bytes
    """
    values = _decode_fields(CREATE_EOA_LAYOUT, payload)
    return CreateEOATxData(
        sig=Signature(r=values["r"], s=values["s"], v=values["v"]),
        message_hash=values["message_hash"],
    )


def encode_tx_data(tx: TxData) -> HexStr:
    """Encode any supported transaction payload."""
    match tx:
        case EIP155TxData():
            return encode_eip155_tx_data(tx)
        case CreateEOATxData():
            return encode_create_eoa_tx_data(tx)
        case _:
            raise TypeError(f"Unsupported transaction data: {type(tx).__name__}")


def decode_tx_data(payload: HexLike) -> TxData:
    """
    Decode a transaction payload, choosing the type from its tag byte.

    Raises:
        InvalidTransactionTag: If the tag byte is not a known TxType
    """
    tag = _read_tag(to_hex_str(payload, "payload"))
    match tag:
        case TxType.EIP155:
            return decode_eip155_tx_data(payload)
        case TxType.CREATE_EOA:
            return decode_create_eoa_tx_data(payload)
        case _:
            logger.debug(f"Rejecting payload with unknown tx type {tag}")
            raise InvalidTransactionTag(None, tag)
