"""Small helpers that sit at the codec's collaborator boundary."""

from __future__ import annotations

from .hash import DIGESTS, blake2b_256, digest, sha3_256, sha256

__all__ = ["DIGESTS", "digest", "sha256", "sha3_256", "blake2b_256"]
