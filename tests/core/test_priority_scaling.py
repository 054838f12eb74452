# [TESTER] v1

from __future__ import annotations

import pytest

from fillreactor.core.errors import InputOutputScaling, InvalidGasPrice
from fillreactor.core.priority import check_one_sided, priority_fee, scale_input, scale_output
from fillreactor.state.orders import PriorityInput, PriorityOutput

from order_factory import SWAPPER, TOKEN_IN, TOKEN_OUT


def test_priority_fee_above_baseline() -> None:
    assert priority_fee(gas_price=1_000, base_fee=400, baseline_priority_fee_wei=100) == 500
    assert priority_fee(gas_price=450, base_fee=400, baseline_priority_fee_wei=100) == 0
    assert priority_fee(gas_price=400, base_fee=400, baseline_priority_fee_wei=0) == 0


def test_gas_price_below_base_fee_rejected() -> None:
    with pytest.raises(InvalidGasPrice):
        priority_fee(gas_price=399, base_fee=400, baseline_priority_fee_wei=0)


def test_output_grows_and_rounds_up() -> None:
    assert scale_output(1_000, 100, 500) == 1_005
    assert scale_output(3, 1, 1) == 4
    assert scale_output(1_000, 100, 0) == 1_000


def test_input_shrinks_and_rounds_down() -> None:
    assert scale_input(1_000, 100, 500) == 995
    assert scale_input(3, 1, 1) == 2
    assert scale_input(1_000, 100_000, 100) == 0
    assert scale_input(1_000, 100_000, 10**6) == 0


def test_only_one_side_may_scale() -> None:
    inp = PriorityInput(token=TOKEN_IN, amount=1_000, mps_per_priority_fee_wei=10)
    flat_out = PriorityOutput(token=TOKEN_OUT, amount=1_000, recipient=SWAPPER)
    scaled_out = PriorityOutput(token=TOKEN_OUT, amount=1_000, recipient=SWAPPER, mps_per_priority_fee_wei=10)
    check_one_sided(inp, (flat_out,))
    check_one_sided(PriorityInput(token=TOKEN_IN, amount=1_000), (scaled_out,))
    with pytest.raises(InputOutputScaling):
        check_one_sided(inp, (flat_out, scaled_out))
