"""
vecpack.errors
--------------

A small, consistent error system for the codec and its helpers.

Design goals
------------
- One root `VecPackError` with a machine-friendly `code` and optional `data`.
- Encode failures (the caller handed us an unrepresentable value) and decode
  failures (the bytes are malformed or not canonical) are distinct classes,
  so callers can tell a programming error from a hostile payload.
- Safe JSON representation (`to_dict`) suitable for logs and CLI output.

This module uses only stdlib so it can be imported first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    # Encode
    UNSUPPORTED_TYPE = "unsupported_type"
    VARINT_TOO_LONG = "varint_too_long"
    DUPLICATE_KEY = "duplicate_key"
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"

    # Decode
    OUT_OF_BOUNDS = "out_of_bounds"
    UNKNOWN_TYPE = "unknown_type"
    NONCANONICAL_ZERO = "noncanonical_zero"
    VARINT_LEADING_ZERO = "varint_leading_zero"
    LENGTH_OVERFLOW = "length_overflow"
    LENGTH_IS_NEGATIVE = "length_is_negative"
    MAP_NOT_CANONICAL = "map_not_canonical"
    TRAILING_BYTES = "trailing_bytes"

    # Envelope / environment
    TX_INVALID = "tx_invalid"
    HASH_MISMATCH = "hash_mismatch"
    CONFIG = "config"


@dataclass(eq=False)
class VecPackError(Exception):
    """
    Root error for vecpack.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (offsets, type names). JSON-serializable.
    cause: Optional[BaseException]
        Wrapped original exception; not part of equality.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{_code_str(self.code)}: {self.message}")

    # ---------------- Public API ----------------

    def with_context(self, **ctx: Any) -> "VecPackError":
        """Return a *new* error with extra context merged (does not mutate)."""
        new = self._clone()
        new.data.update(_jsonmap(ctx))
        return new

    def with_cause(self, exc: BaseException) -> "VecPackError":
        """Attach/replace the causal exception (returns a new instance)."""
        new = self._clone()
        new.cause = exc
        return new

    def _clone(self) -> "VecPackError":
        # Subclass __init__ signatures differ, so copy state instead of re-calling them.
        new = type(self).__new__(type(self))
        new.__dict__.update(self.__dict__)
        new.data = dict(self.data)
        Exception.__init__(new, *self.args)
        return new

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs/CLI."""
        out: Dict[str, Any] = {
            "code": _code_str(self.code),
            "message": self.message,
            "data": _jsonmap(self.data),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:
        parts = [f"{_code_str(self.code)}: {self.message}"]
        if self.data:
            parts.append("[" + ", ".join(f"{k}={v}" for k, v in self.data.items()) + "]")
        return " ".join(parts)


class EncodeError(VecPackError, TypeError):
    """The value handed to `encode` cannot be represented."""

    def __init__(self, code: ErrorCode, message: str = "", **data: Any) -> None:
        super().__init__(code=code, message=message or code.value, data=_jsonmap(data))


class DecodeError(VecPackError, ValueError):
    """The input bytes are malformed or not in canonical form."""

    def __init__(self, code: ErrorCode, message: str = "", **data: Any) -> None:
        super().__init__(code=code, message=message or code.value, data=_jsonmap(data))

    @property
    def offset(self) -> Optional[int]:
        return self.data.get("offset")


class TxError(VecPackError, ValueError):
    def __init__(
        self,
        message: str = "invalid transaction",
        *,
        code: ErrorCode = ErrorCode.TX_INVALID,
        **data: Any,
    ) -> None:
        super().__init__(code=code, message=message, data=_jsonmap(data))


class HashMismatch(TxError):
    def __init__(self, expected: bytes, got: bytes, subject: str = "tx") -> None:
        super().__init__(
            message=f"hash mismatch for {subject}",
            code=ErrorCode.HASH_MISMATCH,
            expected=expected,
            got=got,
            subject=subject,
        )


class ConfigError(VecPackError, ValueError):
    def __init__(self, message: str = "invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _code_str(code: Any) -> str:
    return code.value if isinstance(code, Enum) else str(code)


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; hex-encode bytes; stringify the rest.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v).hex()
    return str(v)


__all__ = [
    "ErrorCode",
    "VecPackError",
    "EncodeError",
    "DecodeError",
    "TxError",
    "HashMismatch",
    "ConfigError",
]
