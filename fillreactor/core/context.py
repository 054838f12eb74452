from __future__ import annotations

from dataclasses import dataclass

from ..state.canonical import canonical_address, require_uint


@dataclass(frozen=True)
class ExecutionContext:
    """
    Environment of one settlement call.

    Attributes:
        caller: Filler submitting the order(s)
        timestamp: Current time; drives time-based decay and deadlines
        block_number: Current block; drives piecewise decay and priority auctions
        base_fee: Current base fee (wei)
        gas_price: Gas price paid by the caller (wei)
    """

    caller: str
    timestamp: int
    block_number: int = 0
    base_fee: int = 0
    gas_price: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "caller", canonical_address(self.caller, name="caller"))
        for name in ("timestamp", "block_number", "base_fee", "gas_price"):
            require_uint(getattr(self, name), name=name)
