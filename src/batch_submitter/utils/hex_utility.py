"""
Hex and byte-width helpers shared by the batch and transaction codecs.

All helpers work on hex text. Fixed-width fields are returned unprefixed so
they can be concatenated directly; callers add the single ``0x`` prefix to
the final encoding.
"""

import string
from typing import Union

from eth_typing import HexStr
from hexbytes import HexBytes
from web3 import Web3

from ..errors import (
    BatchEncodingError,
    FieldLengthMismatch,
    FieldOverflow,
    InvalidHexString,
    OddLengthByteString,
)

HexLike = Union[HexBytes, bytes, str]

_HEX_DIGITS = frozenset(string.hexdigits)


def remove_0x(value: str) -> str:
    """
    Remove a leading '0x' from a hex string.

    Stripping an unprefixed string returns it unchanged.
    """
    if value.startswith("0x"):
        return value[2:]
    return value


def add_0x(value: str) -> HexStr:
    """Prefix a hex string with '0x' unless it already has one."""
    if value.startswith("0x"):
        return HexStr(value)
    return HexStr("0x" + value)


def to_hex_str(value: HexLike, field: str = "value") -> str:
    """
    Normalise bytes or hex text to lowercase unprefixed hex.

    Args:
        value: HexBytes, bytes or a hex string (with or without 0x)
        field: Field name used in error messages

    Returns:
        Unprefixed lowercase hex string

    Raises:
        InvalidHexString: If the value is not hex text or bytes
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if not isinstance(value, str):
        raise InvalidHexString(field, repr(value))

    stripped = remove_0x(value)
    if not _HEX_DIGITS.issuperset(stripped):
        raise InvalidHexString(field, value)
    return stripped.lower()


def _to_int(value: Union[int, str], field: str) -> int:
    if isinstance(value, int):
        return value
    try:
        if value.startswith("0x"):
            return Web3.to_int(hexstr=HexStr(value))
        return Web3.to_int(text=value)
    except ValueError:
        raise BatchEncodingError(f"Invalid numeric value for {field}: {value!r}") from None


def encode_hex(value: Union[int, str], byte_width: int, field: str = "value") -> str:
    """
    Encode a number as a big-endian hex field of exactly byte_width bytes.

    Args:
        value: Integer, decimal string or 0x-prefixed hex string
        byte_width: Width of the field in bytes
        field: Field name used in error messages

    Returns:
        Unprefixed hex string of byte_width * 2 characters, zero-padded

    Raises:
        FieldOverflow: If the value is negative or wider than byte_width
    """
    number = _to_int(value, field)
    if number < 0 or number >= 1 << (8 * byte_width):
        raise FieldOverflow(field, number, byte_width)
    return remove_0x(Web3.to_hex(number)).zfill(byte_width * 2)


def to_verified_bytes(value: HexLike, byte_width: int, field: str = "value") -> str:
    """
    Check that a hex value is exactly byte_width bytes long.

    Used for signature components, hashes and addresses, where padding or
    truncation would silently change the value.

    Raises:
        FieldLengthMismatch: If the hex length is not byte_width * 2
        InvalidHexString: If the value contains non-hex characters
    """
    hex_value = to_hex_str(value, field)
    if len(hex_value) != byte_width * 2:
        raise FieldLengthMismatch(field, byte_width * 2, len(hex_value))
    return hex_value


def ensure_even(value: HexLike, field: str = "value") -> str:
    """
    Check that a variable-length hex value holds whole bytes.

    Raises:
        OddLengthByteString: If the hex length is odd
    """
    hex_value = to_hex_str(value, field)
    if len(hex_value) % 2 != 0:
        raise OddLengthByteString(field, len(hex_value))
    return hex_value
