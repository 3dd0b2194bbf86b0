# SPDX-License-Identifier: Apache-2.0
"""Digest helpers applied to encoded bytes."""
from __future__ import annotations

import hashlib

import pytest

from vecpack import encode, encoded_digest
from vecpack.errors import ConfigError
from vecpack.utils.hash import DIGESTS, blake2b_256, digest, sha3_256, sha256

PAYLOAD = {"to": b"\x01" * 20, "amount": 5}


def test_known_vectors() -> None:
    assert sha256(b"").hex() == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )
    assert sha3_256(b"").hex() == (
        "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a"
    )
    assert blake2b_256(b"") == hashlib.blake2b(b"", digest_size=32).digest()


def test_all_digests_are_32_bytes() -> None:
    for name in DIGESTS:
        assert len(digest(name, bytearray(b"abc"))) == 32


def test_encoded_digest_hashes_canonical_bytes() -> None:
    assert encoded_digest(PAYLOAD) == hashlib.sha256(encode(PAYLOAD)).digest()
    assert encoded_digest(PAYLOAD, "sha3_256") == hashlib.sha3_256(encode(PAYLOAD)).digest()


def test_encoded_digest_ignores_insertion_order() -> None:
    reordered = dict(reversed(list(PAYLOAD.items())))
    assert encoded_digest(reordered) == encoded_digest(PAYLOAD)


def test_unknown_digest() -> None:
    with pytest.raises(ConfigError) as ei:
        digest("md5", b"")
    assert ei.value.data["expected"] == sorted(DIGESTS)
