"""
Canonical map ordering
----------------------

Keys are ordered by the bytes of their *encoded* term, not by their native
value: unsigned bytewise comparison, and when one sequence is a prefix of the
other the shorter sorts first. Python's `bytes` ordering is exactly this, so
the sort key is the encoded key itself.

The encoder sorts with `sort_entries`; the decoder feeds each key's raw bytes
through a `KeyOrderGuard`, which rejects anything not strictly increasing.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..errors import DecodeError, EncodeError, ErrorCode

Entry = Tuple[bytes, bytes]


def compare_bytes(a: bytes, b: bytes) -> int:
    """-1, 0 or 1 as `a` sorts before, equal to, or after `b`."""
    a, b = bytes(a), bytes(b)
    return (a > b) - (a < b)


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Sort (key_bytes, value_bytes) pairs canonically; equal keys are an error."""
    out = sorted(entries, key=lambda kv: kv[0])
    for i in range(1, len(out)):
        if out[i - 1][0] == out[i][0]:
            raise EncodeError(
                ErrorCode.DUPLICATE_KEY,
                "two map keys have the same canonical encoding",
                key=out[i][0],
            )
    return out


class KeyOrderGuard:
    """Tracks the previous key of one map while it is being decoded."""

    __slots__ = ("_prev",)

    def __init__(self) -> None:
        self._prev: Optional[bytes] = None

    def check(self, key_bytes: bytes, offset: int) -> None:
        if self._prev is not None and compare_bytes(key_bytes, self._prev) <= 0:
            raise DecodeError(
                ErrorCode.MAP_NOT_CANONICAL,
                "map keys are not in strictly increasing order",
                offset=offset,
            )
        self._prev = key_bytes


__all__ = ["compare_bytes", "sort_entries", "KeyOrderGuard"]
