#!/usr/bin/env python3
"""Error types raised by the batch and transaction codecs.

Every error here is a local validation failure: it is raised where the bad
value is detected and is never corrected or retried. A batch that fails to
encode must not be submitted.
"""


class BatchEncodingError(ValueError):
    """Base class for all codec validation failures."""


class FieldLengthMismatch(BatchEncodingError):
    """A hex value does not decode to the exact expected byte width."""

    def __init__(self, field: str, expected: int, actual: int) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid length for {field}: expected {expected} hex characters, got {actual}"
        )


class InvalidTransactionTag(BatchEncodingError):
    """The leading tag byte of a payload does not match the expected tx type."""

    def __init__(self, expected: int | None, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        if expected is None:
            message = f"Invalid tx type: unknown tag {actual}"
        else:
            message = f"Invalid tx type: expected {expected}, got {actual}"
        super().__init__(message)


class OddLengthByteString(BatchEncodingError):
    """A variable-length payload has an odd number of hex characters."""

    def __init__(self, field: str, length: int) -> None:
        self.field = field
        self.length = length
        super().__init__(f"Non-even hex string for {field}: {length} hex characters")


class FieldOverflow(BatchEncodingError):
    """A numeric value does not fit in its fixed-width field."""

    def __init__(self, field: str, value: int, byte_width: int) -> None:
        self.field = field
        self.value = value
        self.byte_width = byte_width
        super().__init__(
            f"Value {value} for {field} does not fit in {byte_width} byte(s)"
        )


class InvalidHexString(BatchEncodingError):
    """A value expected to be hex contains non-hex characters."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid hex string for {field}: {value[:20]!r}")


class InvalidMethodId(BatchEncodingError):
    """Calldata does not start with the expected method selector."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid method id: expected {expected}, got {actual}")
