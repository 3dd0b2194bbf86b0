"""
Transaction envelope
====================

Builds the structures that get canonically encoded, hashed and signed:

    unsigned tx = {
      "signer": bytes,           # signer public key
      "nonce":  int,
      "action": {"op": "call", "contract": str, "function": str, "args": [...]},
    }
    tx hash     = sha256(encode(unsigned tx))
    packed tx   = encode({"tx": unsigned tx, "hash": tx hash, "signature": bytes})

Signing is delegated: callers pass any `Signer`, a callable that receives the
tx hash and returns signature bytes. Key handling and curve math live with
the caller.

Public helpers:
- build_tx(signer, contract, function, args, *, nonce=None) -> UnsignedTx
- build_transfer(signer, recipient, amount, symbol, *, nonce=None) -> UnsignedTx
- signing_bytes(tx) -> bytes
- tx_hash(tx) -> bytes
- sign_tx(tx, signer) -> SignedTx
- pack(signed) -> bytes / unpack(packed) -> SignedTx
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol, Sequence, Tuple

from .encoding import decode, encode
from .errors import DecodeError, HashMismatch, TxError
from .logging import get_logger
from .utils.hash import sha256

log = get_logger(__name__)

OP_CALL = "call"
COIN_CONTRACT = "Coin"
TRANSFER_FUNCTION = "transfer"


class Signer(Protocol):
    def __call__(self, digest: bytes) -> bytes: ...


def default_nonce() -> int:
    """Microsecond wall clock; stays below the 2**53 decode ceiling."""
    return time.time_ns() // 1_000


@dataclass(frozen=True)
class TxAction:
    contract: str
    function: str
    args: Tuple[Any, ...] = ()
    op: str = OP_CALL

    def to_obj(self) -> Dict[str, Any]:
        return {
            "op": self.op,
            "contract": self.contract,
            "function": self.function,
            "args": list(self.args),
        }


@dataclass(frozen=True)
class UnsignedTx:
    signer: bytes
    nonce: int
    action: TxAction

    def to_obj(self) -> Dict[str, Any]:
        return {"signer": self.signer, "nonce": self.nonce, "action": self.action.to_obj()}


@dataclass(frozen=True)
class SignedTx:
    tx: UnsignedTx
    hash: bytes
    signature: bytes = field(repr=False)


def build_tx(
    signer: bytes,
    contract: str,
    function: str,
    args: Sequence[Any] = (),
    *,
    nonce: int | None = None,
) -> UnsignedTx:
    if not isinstance(signer, (bytes, bytearray)) or not signer:
        raise TxError("signer must be non-empty public key bytes")
    if not contract or not function:
        raise TxError("contract and function are required")
    n = default_nonce() if nonce is None else nonce
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise TxError("nonce must be a non-negative integer", nonce=str(n))
    return UnsignedTx(
        signer=bytes(signer),
        nonce=n,
        action=TxAction(contract=contract, function=function, args=tuple(args)),
    )


def build_transfer(
    signer: bytes,
    recipient: bytes,
    amount: int,
    symbol: str,
    *,
    nonce: int | None = None,
) -> UnsignedTx:
    """`Coin.transfer(recipient, amount, symbol)`; `amount` is in atomic units."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise TxError("amount must be a positive integer of atomic units", amount=str(amount))
    return build_tx(
        signer,
        COIN_CONTRACT,
        TRANSFER_FUNCTION,
        [bytes(recipient), str(amount), symbol],
        nonce=nonce,
    )


def signing_bytes(tx: UnsignedTx) -> bytes:
    """Canonical bytes of the unsigned tx; the input to the tx hash."""
    return encode(tx.to_obj())


def tx_hash(tx: UnsignedTx) -> bytes:
    return sha256(signing_bytes(tx))


def sign_tx(tx: UnsignedTx, signer: Signer) -> SignedTx:
    h = tx_hash(tx)
    signature = bytes(signer(h))
    log.debug("signed tx", extra={"tx_hash": h.hex(), "nonce": tx.nonce})
    return SignedTx(tx=tx, hash=h, signature=signature)


def pack(signed: SignedTx) -> bytes:
    return encode({"tx": signed.tx.to_obj(), "hash": signed.hash, "signature": signed.signature})


# --------------------------
# Unpacking
# --------------------------

def _field(m: Mapping[Any, Any], name: str, kind: type, where: str) -> Any:
    # Decoded map keys are bytes: text does not survive the round trip.
    v = m.get(name.encode("utf-8"))
    if not isinstance(v, kind) or (kind is int and isinstance(v, bool)):
        raise TxError(f"{where}.{name} missing or not {kind.__name__}")
    return v


def _no_extra_keys(m: Mapping[Any, Any], names: Sequence[str], where: str) -> None:
    extra = set(m) - {n.encode("utf-8") for n in names}
    if extra:
        raise TxError(f"{where} has unexpected keys", keys=sorted(repr(k) for k in extra))


def _text(m: Mapping[Any, Any], name: str, where: str) -> str:
    raw = _field(m, name, bytes, where)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TxError(f"{where}.{name} is not UTF-8").with_cause(e) from e


def unpack(packed: bytes) -> SignedTx:
    """
    Decode a packed tx, check its shape, and verify the embedded hash against
    the re-encoded unsigned tx. Keys outside the envelope, tx and action
    field sets are rejected.
    """
    try:
        env = decode(packed)
    except DecodeError as e:
        err = TxError("packed tx is not canonical", reason=e.to_dict()["code"])
        raise err.with_cause(e) from e
    if not isinstance(env, dict):
        raise TxError("packed tx must be a map")
    _no_extra_keys(env, ("tx", "hash", "signature"), "envelope")

    body = _field(env, "tx", dict, "envelope")
    claimed = _field(env, "hash", bytes, "envelope")
    signature = _field(env, "signature", bytes, "envelope")

    _no_extra_keys(body, ("signer", "nonce", "action"), "tx")
    action = _field(body, "action", dict, "tx")
    _no_extra_keys(action, ("op", "contract", "function", "args"), "action")
    tx = UnsignedTx(
        signer=_field(body, "signer", bytes, "tx"),
        nonce=_field(body, "nonce", int, "tx"),
        action=TxAction(
            op=_text(action, "op", "action"),
            contract=_text(action, "contract", "action"),
            function=_text(action, "function", "action"),
            args=tuple(_field(action, "args", list, "action")),
        ),
    )

    actual = tx_hash(tx)
    if actual != claimed:
        raise HashMismatch(expected=claimed, got=actual)
    return SignedTx(tx=tx, hash=claimed, signature=signature)


__all__ = [
    "Signer",
    "TxAction",
    "UnsignedTx",
    "SignedTx",
    "default_nonce",
    "build_tx",
    "build_transfer",
    "signing_bytes",
    "tx_hash",
    "sign_tx",
    "pack",
    "unpack",
]
