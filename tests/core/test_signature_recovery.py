# [TESTER] v1

from __future__ import annotations

import hashlib

import pytest

from fillreactor.core.signatures import (
    Secp256k1Recoverer,
    address_of,
    decode_signature,
    encode_signature,
    sign_digest,
)

from order_factory import STRANGER, SWAPPER, SWAPPER_KEY

DIGEST = hashlib.sha256(b"fillreactor").digest()
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def test_recover_returns_signer_identity() -> None:
    sig = sign_digest(DIGEST, SWAPPER_KEY)
    assert len(sig) == 2 + 130
    assert Secp256k1Recoverer().recover(DIGEST, sig) == SWAPPER
    assert Secp256k1Recoverer().recover(hashlib.sha256(b"other").digest(), sig) != SWAPPER


def test_identity_is_20_byte_hex() -> None:
    assert SWAPPER.startswith("0x") and len(SWAPPER) == 42
    assert SWAPPER != STRANGER
    assert address_of(SWAPPER_KEY) == SWAPPER


def test_malformed_signatures_recover_to_none() -> None:
    recoverer = Secp256k1Recoverer()
    v, r, s = decode_signature(sign_digest(DIGEST, SWAPPER_KEY))
    assert recoverer.recover(DIGEST, "0x") is None
    assert recoverer.recover(DIGEST, "not hex") is None
    assert recoverer.recover(DIGEST, encode_signature(29, r, s)) is None
    assert recoverer.recover(DIGEST, encode_signature(v, 0, s)) is None
    # High-s twin of a valid signature is rejected.
    assert recoverer.recover(DIGEST, encode_signature(55 - v, r, N - s)) is None


def test_digest_must_be_32_bytes() -> None:
    with pytest.raises(ValueError):
        sign_digest(b"short", SWAPPER_KEY)
    with pytest.raises(ValueError):
        Secp256k1Recoverer().recover(b"short", "0x")
