"""
Term model
==========

An explicit tagged variant for the values the codec can encode:

    Null | Bool | Integer | ByteString | List | KeyedCollection

`to_term()` is the one place native Python values are coerced into this
model. The encoder only ever walks `Term` nodes, so anything that reaches it
has already been accepted here.

Native inputs accepted by `to_term`:
- None, bool
- int (any size; bool excluded)
- str (UTF-8) and bytes/bytearray/memoryview: both become ByteString
- list/tuple
- any Mapping, and dataclass instances (field name -> value)

`FrozenMap` is the hashable mapping the decoder uses when a map key is
itself a keyed collection. `FrozenBool` stands in for a boolean inside a
decoded key: Python hashes `True` and `1` alike, the wire format does not.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, is_dataclass
from enum import IntEnum
from typing import Any, Iterator, Tuple, Union

from ..errors import ConfigError, EncodeError, ErrorCode


class Tag(IntEnum):
    NULL = 0x00
    TRUE = 0x01
    FALSE = 0x02
    INTEGER = 0x03
    # 0x04 is reserved and never produced or accepted.
    BYTES = 0x05
    LIST = 0x06
    KEYED_COLLECTION = 0x07


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class ByteString:
    value: bytes


@dataclass(frozen=True)
class List:
    items: Tuple["Term", ...] = ()


@dataclass(frozen=True)
class KeyedCollection:
    """Entries in caller order; the encoder imposes canonical order."""

    entries: Tuple[Tuple["Term", "Term"], ...] = ()


Term = Union[Null, Bool, Integer, ByteString, List, KeyedCollection]

TERM_TYPES = (Null, Bool, Integer, ByteString, List, KeyedCollection)

NULL = Null()

# Each level of nesting costs one interpreter frame per direction.
MAX_DEPTH_LIMIT = 512


def check_max_depth(max_depth: int) -> int:
    """Return `max_depth` if it is an int within 1..MAX_DEPTH_LIMIT."""
    if (
        not isinstance(max_depth, int)
        or isinstance(max_depth, bool)
        or not 1 <= max_depth <= MAX_DEPTH_LIMIT
    ):
        raise ConfigError(
            f"max_depth must be an int in 1..{MAX_DEPTH_LIMIT}", max_depth=str(max_depth)
        )
    return max_depth


def to_term(obj: Any, *, max_depth: int = 256) -> Term:
    """Coerce a native Python value into a Term tree."""
    return _to_term(obj, check_max_depth(max_depth))


def _to_term(obj: Any, depth: int) -> Term:
    if depth < 0:
        raise EncodeError(ErrorCode.MAX_DEPTH_EXCEEDED, "value nests too deeply")

    if isinstance(obj, TERM_TYPES):
        return obj
    if obj is None:
        return NULL
    if isinstance(obj, (bool, FrozenBool)):
        return Bool(bool(obj))
    if isinstance(obj, int):
        return Integer(int(obj))
    if isinstance(obj, str):
        try:
            return ByteString(obj.encode("utf-8"))
        except UnicodeEncodeError as e:
            raise EncodeError(
                ErrorCode.UNSUPPORTED_TYPE, "text is not encodable as UTF-8"
            ).with_cause(e) from e
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return ByteString(bytes(obj))

    # Plain loops: one frame per nesting level keeps max_depth honest.
    if isinstance(obj, (list, tuple)):
        items = []
        for x in obj:
            items.append(_to_term(x, depth - 1))
        return List(tuple(items))
    if isinstance(obj, Mapping):
        entries = []
        for k, v in obj.items():
            entries.append((_to_term(k, depth - 1), _to_term(v, depth - 1)))
        return KeyedCollection(tuple(entries))
    if is_dataclass(obj) and not isinstance(obj, type):
        # Shallow on purpose: nested values go back through _to_term.
        entries = []
        for f in fields(obj):
            name = ByteString(f.name.encode("utf-8"))
            entries.append((name, _to_term(getattr(obj, f.name), depth - 1)))
        return KeyedCollection(tuple(entries))

    raise EncodeError(
        ErrorCode.UNSUPPORTED_TYPE,
        f"unsupported type: {type(obj).__name__}",
        type=type(obj).__name__,
    )


class FrozenBool:
    """
    A boolean inside a decoded map key.

    Hashes like the bool it wraps but compares equal only to booleans, so
    `{true: a, 1: b}` keeps both entries. Re-encodes as a Bool term.
    """

    __slots__ = ("value",)

    def __init__(self, value: bool):
        self.value = bool(value)

    def __bool__(self) -> bool:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FrozenBool):
            return self.value is other.value
        if isinstance(other, bool):
            return self.value is other
        return NotImplemented

    def __repr__(self) -> str:
        return f"FrozenBool({self.value})"


class FrozenMap(Mapping):
    """Read-only, hashable mapping for decoded map keys."""

    __slots__ = ("_d", "_hash")

    def __init__(self, items: Any = ()):
        self._d = dict(items)
        self._hash = None

    def __getitem__(self, key: Any) -> Any:
        return self._d[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._d)

    def __len__(self) -> int:
        return len(self._d)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(tuple(self._d.items()))
        return self._hash

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Mapping):
            return dict(self._d) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"FrozenMap({self._d!r})"


def freeze(v: Any) -> Any:
    """Hashable form of a decoded value, used for map keys."""
    if isinstance(v, bool):
        return FrozenBool(v)
    if isinstance(v, list):
        items = []
        for x in v:
            items.append(freeze(x))
        return tuple(items)
    if isinstance(v, dict):
        # Keys of a decoded dict are frozen already.
        entries = {}
        for k, x in v.items():
            entries[k] = freeze(x)
        return FrozenMap(entries)
    return v


__all__ = [
    "Tag",
    "Null",
    "Bool",
    "Integer",
    "ByteString",
    "List",
    "KeyedCollection",
    "Term",
    "TERM_TYPES",
    "NULL",
    "to_term",
    "FrozenMap",
    "FrozenBool",
    "freeze",
    "MAX_DEPTH_LIMIT",
    "check_max_depth",
]
