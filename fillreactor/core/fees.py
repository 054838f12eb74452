"""
Protocol fee injection (deterministic, integer-only).

Fees are appended to a resolved order as extra output rows paid by the
filler; the swapper-visible outputs are never touched. One row is produced
per distinct output token:

    fee = floor(sum(outputs with that token) * fee_bps(input_token, token) / 10_000)

Rows with a zero rate or a zero amount are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Protocol, Tuple

from ..state.canonical import canonical_address
from ..state.orders import OutputToken, ResolvedOrder
from .errors import FeeTooLarge
from .math import BPS, mul_div_down


DEFAULT_MAX_FEE_BPS = 5


class FeeController(Protocol):
    fee_recipient: str

    def fee_bps(self, token_in: str, token_out: str) -> int:
        ...


@dataclass
class StaticFeeController:
    """Fee rates from a fixed ``(token_in, token_out) -> bps`` table."""

    fee_recipient: str
    _rates: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fee_recipient = canonical_address(self.fee_recipient, name="fee_recipient")

    def set_fee(self, token_in: str, token_out: str, bps: int) -> None:
        if not isinstance(bps, int) or isinstance(bps, bool):
            raise TypeError("bps must be an int")
        if not (0 <= bps <= BPS):
            raise ValueError(f"bps must be in [0, {BPS}]: {bps}")
        key = (canonical_address(token_in, name="token_in"), canonical_address(token_out, name="token_out"))
        if bps == 0:
            self._rates.pop(key, None)
        else:
            self._rates[key] = bps

    def fee_bps(self, token_in: str, token_out: str) -> int:
        return self._rates.get((token_in, token_out), 0)


def _token_total(outputs: Tuple[OutputToken, ...], token: str) -> int:
    return sum(o.amount for o in outputs if o.token == token)


def fee_outputs(order: ResolvedOrder, controller: FeeController) -> List[OutputToken]:
    rows: List[OutputToken] = []
    seen = set()
    for out in order.outputs:
        if out.token in seen:
            continue
        seen.add(out.token)
        bps = controller.fee_bps(order.input.token, out.token)
        if bps == 0:
            continue
        amount = mul_div_down(_token_total(order.outputs, out.token), bps, BPS)
        if amount == 0:
            continue
        rows.append(OutputToken(token=out.token, amount=amount, recipient=controller.fee_recipient))
    return rows


def inject_fees(
    order: ResolvedOrder,
    controller: FeeController | None,
    *,
    max_fee_bps: int = DEFAULT_MAX_FEE_BPS,
) -> ResolvedOrder:
    """
    Return `order` with fee rows appended.

    Raises:
        FeeTooLarge: A fee row exceeds `max_fee_bps` of its token's output total
    """
    if controller is None:
        return order
    rows = fee_outputs(order, controller)
    if not rows:
        return order
    for row in rows:
        cap = mul_div_down(_token_total(order.outputs, row.token), max_fee_bps, BPS)
        if row.amount > cap:
            raise FeeTooLarge(f"fee {row.amount} of {row.token} exceeds {max_fee_bps} bps cap ({cap})")
    return replace(order, outputs=order.outputs + tuple(rows))
