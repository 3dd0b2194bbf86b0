"""
vecpack.utils.hash
==================

Thin wrappers for the digests applied to encoded bytes before signing.

Provided digests (all return 32 `bytes`):
- sha256(data)       # what transaction hashes use
- sha3_256(data)
- blake2b_256(data)

`digest(name, data)` looks one up by name; unknown names raise ConfigError
so a bad CLI flag or config value fails loudly.
"""

from __future__ import annotations

import hashlib
from typing import Callable, Dict, Union

from ..errors import ConfigError

BytesLike = Union[bytes, bytearray, memoryview]


def sha256(data: BytesLike) -> bytes:
    """SHA-256 digest."""
    return hashlib.sha256(bytes(data)).digest()


def sha3_256(data: BytesLike) -> bytes:
    """SHA3-256 digest."""
    return hashlib.sha3_256(bytes(data)).digest()


def blake2b_256(data: BytesLike) -> bytes:
    return hashlib.blake2b(bytes(data), digest_size=32).digest()


DIGESTS: Dict[str, Callable[[BytesLike], bytes]] = {
    "sha256": sha256,
    "sha3_256": sha3_256,
    "blake2b_256": blake2b_256,
}


def digest(name: str, data: BytesLike) -> bytes:
    try:
        fn = DIGESTS[name]
    except KeyError:
        raise ConfigError(
            f"unsupported digest {name!r}", expected=sorted(DIGESTS)
        ) from None
    return fn(data)


__all__ = ["BytesLike", "DIGESTS", "digest", "sha256", "sha3_256", "blake2b_256"]
