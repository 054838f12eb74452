"""
State and order data models for the reactor
"""

from .balances import BalanceTable
from .nonces import NonceStore
from .orders import (
    Order,
    OrderInfo,
    OrderType,
    ResolvedOrder,
    SignedOrder,
    decode_order,
    encode_order,
    order_hash,
)

__all__ = [
    "BalanceTable",
    "NonceStore",
    "Order",
    "OrderInfo",
    "OrderType",
    "ResolvedOrder",
    "SignedOrder",
    "decode_order",
    "encode_order",
    "order_hash",
]
