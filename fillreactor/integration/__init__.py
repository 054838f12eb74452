"""
Settlement engine and its collaborators
"""

from .config import ReactorConfig, load_config
from .reactor import Fill, FillStrategy, SettlementEngine
from .transfers import InMemoryTokenLedger, TransferService, permit_digest
from .validation import OrderValidator, SwapperAllowlistValidator

__all__ = [
    "ReactorConfig",
    "load_config",
    "Fill",
    "FillStrategy",
    "SettlementEngine",
    "InMemoryTokenLedger",
    "TransferService",
    "permit_digest",
    "OrderValidator",
    "SwapperAllowlistValidator",
]
