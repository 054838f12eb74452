"""
Additional per-order validation.

An order may name a validator identity in `info.additional_validation_contract`
along with opaque `additional_validation_data`. The engine looks the identity
up in its validator registry and asks it whether the order may settle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping, Optional, Protocol

from ..core.errors import InvalidValidationContract, ValidationFailed
from ..state.canonical import canonical_address, hex_to_bytes, is_zero_address
from ..state.orders import OrderInfo


class OrderValidator(Protocol):
    def is_valid(self, order_info: OrderInfo, validation_data: bytes) -> bool:
        ...


@dataclass(frozen=True)
class SwapperAllowlistValidator:
    """Accepts orders whose swapper is on a fixed allowlist; ignores the data."""

    allowed: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, swappers: Iterable[str]) -> "SwapperAllowlistValidator":
        return cls(allowed=frozenset(canonical_address(s, name="swapper") for s in swappers))

    def is_valid(self, order_info: OrderInfo, validation_data: bytes) -> bool:
        return order_info.swapper in self.allowed


def run_additional_validation(
    order_info: OrderInfo,
    validators: Optional[Mapping[str, OrderValidator]],
) -> None:
    """
    Raises:
        InvalidValidationContract: The named validator is not registered
        ValidationFailed: The validator rejected the order
    """
    contract = order_info.additional_validation_contract
    if is_zero_address(contract):
        return
    validator = (validators or {}).get(canonical_address(contract, name="additional_validation_contract"))
    if validator is None:
        raise InvalidValidationContract(f"no validator registered for {contract}")
    data = hex_to_bytes(order_info.additional_validation_data, name="additional_validation_data")
    if not validator.is_valid(order_info, data):
        raise ValidationFailed(f"validator {contract} rejected order from {order_info.swapper}")
