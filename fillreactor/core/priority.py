"""Priority-fee scaling.

Priority orders are priced by how much the filler pays in priority fee above
a signed baseline. Each wei of fee moves a leg by `mps_per_priority_fee_wei`
milli-bps: outputs grow, inputs shrink. Only one side of an order may scale.
"""

from __future__ import annotations

from typing import Sequence

from ..state.orders import PriorityInput, PriorityOutput
from .errors import InputOutputScaling, InvalidGasPrice
from .math import MPS, mul_div_down, mul_div_up


def priority_fee(gas_price: int, base_fee: int, baseline_priority_fee_wei: int) -> int:
    if gas_price < base_fee:
        raise InvalidGasPrice(f"gas_price {gas_price} < base_fee {base_fee}")
    fee = gas_price - base_fee
    if fee <= baseline_priority_fee_wei:
        return 0
    return fee - baseline_priority_fee_wei


def scale_input(amount: int, mps_per_priority_fee_wei: int, fee: int) -> int:
    scaled = fee * mps_per_priority_fee_wei
    if scaled >= MPS:
        return 0
    return mul_div_down(amount, MPS - scaled, MPS)


def scale_output(amount: int, mps_per_priority_fee_wei: int, fee: int) -> int:
    return mul_div_up(amount, MPS + fee * mps_per_priority_fee_wei, MPS)


def check_one_sided(input_leg: PriorityInput, outputs: Sequence[PriorityOutput]) -> None:
    if input_leg.mps_per_priority_fee_wei == 0:
        return
    if any(o.mps_per_priority_fee_wei != 0 for o in outputs):
        raise InputOutputScaling("input and outputs cannot both scale with priority fee")
