"""
Order resolution: decay, cosigner overrides, exclusivity, priority scaling, fees
"""

from .context import ExecutionContext
from .decay import linear_decay, piecewise_decay
from .errors import (
    AuthorizationError,
    LiquidityError,
    MalformedOrderError,
    ReactorError,
    TimingError,
)
from .fees import FeeController, StaticFeeController, inject_fees
from .resolvers import ResolverDeps, resolve, resolve_order
from .signatures import Secp256k1Recoverer, SignatureRecoverer

__all__ = [
    "ExecutionContext",
    "linear_decay",
    "piecewise_decay",
    "AuthorizationError",
    "LiquidityError",
    "MalformedOrderError",
    "ReactorError",
    "TimingError",
    "FeeController",
    "StaticFeeController",
    "inject_fees",
    "ResolverDeps",
    "resolve",
    "resolve_order",
    "Secp256k1Recoverer",
    "SignatureRecoverer",
]
