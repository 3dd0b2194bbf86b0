"""
vecpack: canonical, deterministic binary encoding of structured values.

Two logically equal values always encode to the same bytes, so the output
can be hashed and signed. The codec lives in `vecpack.encoding`; the
transaction envelope built on top of it lives in `vecpack.tx`.

Only the codec surface and version are re-exported here.
"""

from __future__ import annotations

from .encoding import decode, encode, encoded_digest, to_term
from .errors import DecodeError, EncodeError, ErrorCode, VecPackError
from .version import __version__, get_version

__all__ = [
    "__version__",
    "get_version",
    "encode",
    "decode",
    "encoded_digest",
    "to_term",
    "ErrorCode",
    "VecPackError",
    "EncodeError",
    "DecodeError",
]
