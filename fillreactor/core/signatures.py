"""Signature recovery capability.

Resolution and settlement never verify signatures themselves; they ask an
injected `SignatureRecoverer` who signed a digest and compare identities.
The default recoverer uses secp256k1 recoverable signatures from `py_ecc`.

Identity of a key: last 20 bytes of SHA-256 over the 64-byte uncompressed
public key ``x || y``. Signatures are 65 bytes ``r || s || v`` as 0x-hex,
with ``v`` in {27, 28} and low-``s`` only.
"""

from __future__ import annotations

import hashlib
from typing import Optional, Protocol, Tuple

from py_ecc.secp256k1 import secp256k1

from ..state.canonical import hex_to_bytes_fixed

SIGNATURE_NBYTES = 65
_N: int = secp256k1.N


class SignatureRecoverer(Protocol):
    def recover(self, digest: bytes, signature: str) -> Optional[str]:
        """Identity that produced `signature` over `digest`, or None if invalid."""
        ...


def address_from_public_key(public_key: Tuple[int, int]) -> str:
    x, y = public_key
    raw = x.to_bytes(32, "big") + y.to_bytes(32, "big")
    return "0x" + hashlib.sha256(raw).digest()[-20:].hex()


def address_of(private_key: bytes) -> str:
    return address_from_public_key(secp256k1.privtopub(private_key))


def encode_signature(v: int, r: int, s: int) -> str:
    return "0x" + (r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])).hex()


def decode_signature(signature: str) -> Tuple[int, int, int]:
    raw = hex_to_bytes_fixed(signature, nbytes=SIGNATURE_NBYTES, name="signature")
    r = int.from_bytes(raw[:32], "big")
    s = int.from_bytes(raw[32:64], "big")
    return raw[64], r, s


def sign_digest(digest: bytes, private_key: bytes) -> str:
    if len(digest) != 32:
        raise ValueError("digest must be 32 bytes")
    v, r, s = secp256k1.ecdsa_raw_sign(digest, private_key)
    return encode_signature(v, r, s)


class Secp256k1Recoverer:
    """`SignatureRecoverer` backed by `py_ecc.secp256k1.ecdsa_raw_recover`."""

    def recover(self, digest: bytes, signature: str) -> Optional[str]:
        if len(digest) != 32:
            raise ValueError("digest must be 32 bytes")
        try:
            v, r, s = decode_signature(signature)
        except (TypeError, ValueError):
            return None
        if v not in (27, 28):
            return None
        if not (0 < r < _N) or not (0 < s <= _N // 2):
            return None
        try:
            point = secp256k1.ecdsa_raw_recover(digest, (v, r, s))
        except (ValueError, ZeroDivisionError):
            return None
        if not point or tuple(point) == (0, 0):
            return None
        return address_from_public_key(point)
