"""
vecpack.encoding
================

Public, stable encoding surface:

- encode / decode: the canonical term codec
- the explicit Term model (values.py) and its single coercion point, to_term
- encoded_digest: hash of a value's canonical bytes

Modules
-------
- varint.py:   canonical sign-and-magnitude integers
- term.py:     tagged terms, top-level encode/decode
- ordering.py: canonical map key order
- values.py:   Term variant, FrozenMap
- buffer.py:   bounded read cursor
"""

from __future__ import annotations

from typing import Any

from ..utils.hash import digest
from .ordering import compare_bytes
from .term import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT, decode, encode, encode_term
from .values import (
    Bool,
    ByteString,
    FrozenBool,
    FrozenMap,
    Integer,
    KeyedCollection,
    List,
    Null,
    Tag,
    Term,
    to_term,
)
from .varint import MAX_VARINT_BYTES, SAFE_INTEGER_MAX, decode_varint, encode_varint


def encoded_digest(value: Any, algo: str = "sha256") -> bytes:
    """digest(algo, encode(value)): content address of a value."""
    return digest(algo, encode(value))


__all__ = [
    "encode",
    "decode",
    "encode_term",
    "encoded_digest",
    "compare_bytes",
    "encode_varint",
    "decode_varint",
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "MAX_VARINT_BYTES",
    "SAFE_INTEGER_MAX",
    "Tag",
    "Term",
    "Null",
    "Bool",
    "Integer",
    "ByteString",
    "List",
    "KeyedCollection",
    "FrozenMap",
    "FrozenBool",
    "to_term",
]
