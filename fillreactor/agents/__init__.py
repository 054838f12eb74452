"""
Signing helpers for swappers and cosigners
"""

from .order_signer import (
    cosign_order,
    generate_private_key,
    sign_order,
)

__all__ = [
    "cosign_order",
    "generate_private_key",
    "sign_order",
]
