"""
Order signing for swappers and cosigners.
"""

from __future__ import annotations

import secrets
from dataclasses import replace
from typing import Any

from py_ecc.secp256k1 import secp256k1

from ..core.cosigner import cosigner_digest
from ..core.signatures import address_of, sign_digest
from ..integration.transfers import permit_digest
from ..state.orders import Order, SignedOrder, encode_order, order_hash


def generate_private_key() -> bytes:
    """Random secp256k1 private key (32 bytes, in ``[1, N)``)."""
    while True:
        key = secrets.token_bytes(32)
        if 0 < int.from_bytes(key, "big") < secp256k1.N:
            return key


def private_key_from_int(value: int) -> bytes:
    if not (0 < value < secp256k1.N):
        raise ValueError("private key out of range")
    return value.to_bytes(32, "big")


def swapper_digest(order: Order, *, chain_id: str) -> bytes:
    """Permit digest the swapper signs: one pull of at most `input.max_amount`, bound to the order hash."""
    return permit_digest(
        chain_id=chain_id,
        token=order.input.token,
        spender=order.info.reactor,
        max_amount=order.input.max_amount,
        nonce=order.info.nonce,
        deadline=order.info.deadline,
        witness_hash=order_hash(order),
    )


def sign_order(order: Order, private_key: bytes, *, chain_id: str) -> SignedOrder:
    """
    Sign `order` as its swapper.

    Raises:
        ValueError: `private_key` does not belong to `order.info.swapper`
    """
    if address_of(private_key) != order.info.swapper:
        raise ValueError("private key does not match order swapper")
    signature = sign_digest(swapper_digest(order, chain_id=chain_id), private_key)
    return SignedOrder(order=encode_order(order), signature=signature)


def cosign_order(order: Any, cosigner_data: Any, private_key: bytes, *, chain_id: str) -> Any:
    """Attach `cosigner_data` and the cosigner's signature over it to a cosigned order."""
    if address_of(private_key) != order.cosigner:
        raise ValueError("private key does not match order cosigner")
    digest = cosigner_digest(order_hash(order), chain_id, cosigner_data)
    return replace(order, cosigner_data=cosigner_data, cosignature=sign_digest(digest, private_key))
