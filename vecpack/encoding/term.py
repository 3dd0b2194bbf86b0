"""
Canonical term codec
--------------------

Every term is a one-byte tag followed by a tag-specific payload:

    NULL  0x00                      -
    TRUE  0x01                      -
    FALSE 0x02                      -
    INT   0x03                      varint(value)
    BYTES 0x05                      varint(len) || raw bytes
    LIST  0x06                      varint(count) || term*
    MAP   0x07                      varint(count) || (term(key) || term(value))*

Map entries are written in canonical key order (see ordering.py) and the
decoder rejects any other order. Tag 0x04 is reserved.

Decoding yields native Python values:

    None | bool | int | bytes | list | dict

Text and raw bytes both come back as `bytes`; structures and mappings both
come back as `dict`. Map keys are made hashable with `values.freeze`, which
also keeps boolean keys apart from the integers Python considers equal.

Every entry point takes `max_depth` (1..MAX_DEPTH_LIMIT); deeper input
fails with max_depth_exceeded rather than exhausting the interpreter stack.

Public API:
- encode(value) -> bytes
- decode(data) -> object
- encode_term(term, out)  (lower level; term must already be a Term)
"""

from __future__ import annotations

from typing import Any, Dict, List as _List

from ..errors import DecodeError, EncodeError, ErrorCode
from .buffer import Cursor
from .ordering import KeyOrderGuard, sort_entries
from .values import (
    Bool,
    ByteString,
    Integer,
    KeyedCollection,
    List,
    Null,
    Tag,
    MAX_DEPTH_LIMIT,
    Term,
    check_max_depth,
    freeze,
    to_term,
)
from .varint import decode_length, decode_varint, encode_varint

DEFAULT_MAX_DEPTH = 256


# ------------------------
# Encoder
# ------------------------

def encode_term(term: Term, out: bytearray, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Append the canonical encoding of `term` to `out`."""
    _encode(term, out, check_max_depth(max_depth))


def _encode(term: Term, out: bytearray, depth: int) -> None:
    if depth < 0:
        raise EncodeError(ErrorCode.MAX_DEPTH_EXCEEDED, "value nests too deeply")

    if isinstance(term, Null):
        out.append(Tag.NULL)
    elif isinstance(term, Bool):
        out.append(Tag.TRUE if term.value else Tag.FALSE)
    elif isinstance(term, Integer):
        if not isinstance(term.value, int) or isinstance(term.value, bool):
            raise EncodeError(ErrorCode.UNSUPPORTED_TYPE, "Integer term must hold an int")
        out.append(Tag.INTEGER)
        out += encode_varint(term.value)
    elif isinstance(term, ByteString):
        if not isinstance(term.value, bytes):
            raise EncodeError(ErrorCode.UNSUPPORTED_TYPE, "ByteString term must hold bytes")
        out.append(Tag.BYTES)
        out += encode_varint(len(term.value))
        out += term.value
    elif isinstance(term, List):
        out.append(Tag.LIST)
        out += encode_varint(len(term.items))
        for item in term.items:
            _encode(item, out, depth - 1)
    elif isinstance(term, KeyedCollection):
        pairs = []
        for k, v in term.entries:
            kb, vb = bytearray(), bytearray()
            _encode(k, kb, depth - 1)
            _encode(v, vb, depth - 1)
            pairs.append((bytes(kb), bytes(vb)))
        out.append(Tag.KEYED_COLLECTION)
        out += encode_varint(len(pairs))
        for kb, vb in sort_entries(pairs):
            out += kb
            out += vb
    else:
        raise EncodeError(
            ErrorCode.UNSUPPORTED_TYPE,
            f"not a term: {type(term).__name__}",
            type=type(term).__name__,
        )


def encode(value: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """
    Encode `value` (a Term or a native value accepted by `to_term`) to its
    canonical bytes. Raises EncodeError without producing output on failure.
    """
    term = to_term(value, max_depth=max_depth)
    out = bytearray()
    _encode(term, out, max_depth)
    return bytes(out)


# ------------------------
# Decoder (strict)
# ------------------------

def _decode(buf: Cursor, depth: int) -> Any:
    start = buf.i
    if depth < 0:
        raise DecodeError(ErrorCode.MAX_DEPTH_EXCEEDED, "input nests too deeply", offset=start)

    tag = buf.get1()

    if tag == Tag.NULL:
        return None
    if tag == Tag.TRUE:
        return True
    if tag == Tag.FALSE:
        return False
    if tag == Tag.INTEGER:
        return decode_varint(buf)
    if tag == Tag.BYTES:
        n = decode_length(buf)
        return buf.get(n)
    if tag == Tag.LIST:
        count = decode_length(buf)
        items: _List[Any] = []
        for _ in range(count):
            items.append(_decode(buf, depth - 1))
        return items
    if tag == Tag.KEYED_COLLECTION:
        count = decode_length(buf)
        guard = KeyOrderGuard()
        out: Dict[Any, Any] = {}
        for _ in range(count):
            key_start = buf.i
            key = freeze(_decode(buf, depth - 1))
            guard.check(buf.span(key_start), key_start)
            out[key] = _decode(buf, depth - 1)
        return out

    raise DecodeError(ErrorCode.UNKNOWN_TYPE, f"unknown type tag 0x{tag:02x}", offset=start)


def decode(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """
    Decode canonical bytes back to Python values. Any deviation from the
    canonical form raises DecodeError; there is no partial result.
    """
    if isinstance(data, (str, int)):
        raise TypeError(f"decode expects bytes, got {type(data).__name__}")
    check_max_depth(max_depth)
    buf = Cursor(bytes(data))
    obj = _decode(buf, max_depth)
    if not buf.at_end:
        raise DecodeError(
            ErrorCode.TRAILING_BYTES,
            f"{buf.n - buf.i} trailing bytes after value",
            offset=buf.i,
        )
    return obj


__all__ = ["DEFAULT_MAX_DEPTH", "MAX_DEPTH_LIMIT", "encode", "decode", "encode_term"]
