"""
Canonical signed varint
-----------------------

Sign-and-magnitude, big-endian, minimal length:

    0            -> 0x00
    n != 0       -> header || magnitude
    header       =  (sign << 7) | len(magnitude)      # sign = 1 for n < 0
    magnitude    =  |n| as big-endian bytes, first byte non-zero, 1..16 bytes

Every integer has exactly one encoding. Varint bytes are compared when
ordering map keys, so any slack here would break signatures across
implementations.

The decoder additionally caps magnitudes at 2**53 - 1 (the interoperable
safe-integer ceiling), which is tighter than the 16-byte structural cap the
encoder enforces.
"""

from __future__ import annotations

from ..errors import DecodeError, EncodeError, ErrorCode
from .buffer import Cursor

MAX_VARINT_BYTES = 16
SAFE_INTEGER_MAX = (1 << 53) - 1

_SIGN_BIT = 0x80
_LEN_MASK = 0x7F


def encode_varint(n: int) -> bytes:
    """Encode a signed integer to its canonical varint bytes."""
    if n == 0:
        return b"\x00"
    sign = 1 if n < 0 else 0
    mag = -n if sign else n
    length = (mag.bit_length() + 7) // 8
    if length == 0 or length > MAX_VARINT_BYTES:
        raise EncodeError(
            ErrorCode.VARINT_TOO_LONG,
            f"magnitude needs {length} bytes (max {MAX_VARINT_BYTES})",
            bytes_needed=length,
        )
    return bytes([(sign << 7) | length]) + mag.to_bytes(length, "big")


def decode_varint(buf: Cursor) -> int:
    """Read one canonical varint at the cursor."""
    start = buf.i
    header = buf.get1()
    if header == 0x00:
        return 0
    if header == _SIGN_BIT:
        raise DecodeError(ErrorCode.NONCANONICAL_ZERO, "negative zero varint", offset=start)

    sign = header >> 7
    length = header & _LEN_MASK
    if length > MAX_VARINT_BYTES:
        raise DecodeError(
            ErrorCode.VARINT_TOO_LONG,
            f"varint declares {length} magnitude bytes (max {MAX_VARINT_BYTES})",
            offset=start,
        )

    raw = buf.get(length)
    if raw[0] == 0:
        raise DecodeError(
            ErrorCode.VARINT_LEADING_ZERO, "varint magnitude has a leading zero byte", offset=start
        )
    mag = int.from_bytes(raw, "big")
    if mag > SAFE_INTEGER_MAX:
        raise DecodeError(
            ErrorCode.LENGTH_OVERFLOW, "varint magnitude exceeds 2**53 - 1", offset=start
        )
    return -mag if sign else mag


def decode_length(buf: Cursor) -> int:
    """Varint that must be non-negative (byte lengths and element counts)."""
    start = buf.i
    n = decode_varint(buf)
    if n < 0:
        raise DecodeError(ErrorCode.LENGTH_IS_NEGATIVE, f"negative length {n}", offset=start)
    return n


__all__ = [
    "MAX_VARINT_BYTES",
    "SAFE_INTEGER_MAX",
    "encode_varint",
    "decode_varint",
    "decode_length",
]
