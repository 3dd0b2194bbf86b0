"""Bounded read cursor shared by the varint and term decoders."""

from __future__ import annotations

from ..errors import DecodeError, ErrorCode


class Cursor:
    """Single advancing offset over an immutable input buffer."""

    __slots__ = ("b", "i", "n")

    def __init__(self, b: bytes):
        self.b = memoryview(b)
        self.i = 0
        self.n = len(b)

    def get(self, k: int) -> bytes:
        if k < 0 or self.i + k > self.n:
            raise DecodeError(
                ErrorCode.OUT_OF_BOUNDS,
                f"read of {k} bytes past end of input",
                offset=self.i,
                length=self.n,
            )
        out = self.b[self.i:self.i + k].tobytes()
        self.i += k
        return out

    def get1(self) -> int:
        if self.i >= self.n:
            raise DecodeError(
                ErrorCode.OUT_OF_BOUNDS, "read past end of input", offset=self.i, length=self.n
            )
        v = self.b[self.i]
        self.i += 1
        return int(v)

    def span(self, start: int) -> bytes:
        """Raw bytes consumed since `start`."""
        return self.b[start:self.i].tobytes()

    @property
    def at_end(self) -> bool:
        return self.i == self.n
