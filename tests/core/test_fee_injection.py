# [TESTER] v1

from __future__ import annotations

import pytest

from fillreactor.core.errors import FeeTooLarge
from fillreactor.core.fees import StaticFeeController, fee_outputs, inject_fees
from fillreactor.state.orders import InputToken, OutputToken, ResolvedOrder

from order_factory import FEE_RECIPIENT, SWAPPER, TOKEN_IN, TOKEN_OUT, TOKEN_OUT_2, info

OTHER = "0x" + "0d" * 20


def _resolved(*outputs: OutputToken) -> ResolvedOrder:
    return ResolvedOrder(
        info=info(),
        input=InputToken(token=TOKEN_IN, amount=1_000, max_amount=1_000),
        outputs=tuple(outputs),
        signature="0x",
        hash="0x" + "11" * 32,
    )


ORDER = _resolved(
    OutputToken(token=TOKEN_OUT, amount=1_000_000, recipient=SWAPPER),
    OutputToken(token=TOKEN_OUT, amount=500_000, recipient=OTHER),
    OutputToken(token=TOKEN_OUT_2, amount=300_000, recipient=SWAPPER),
)


def _controller(bps: int, token_out: str = TOKEN_OUT) -> StaticFeeController:
    controller = StaticFeeController(fee_recipient=FEE_RECIPIENT)
    controller.set_fee(TOKEN_IN, token_out, bps)
    return controller


def test_no_controller_is_identity() -> None:
    assert inject_fees(ORDER, None) is ORDER


def test_fee_row_per_token_over_same_token_total() -> None:
    out = inject_fees(ORDER, _controller(5))
    assert out.outputs[:3] == ORDER.outputs
    assert out.outputs[3:] == (OutputToken(token=TOKEN_OUT, amount=750, recipient=FEE_RECIPIENT),)


def test_fee_rounds_down_and_zero_rows_are_skipped() -> None:
    tiny = _resolved(OutputToken(token=TOKEN_OUT, amount=1_999, recipient=SWAPPER))
    assert [o.amount for o in fee_outputs(tiny, _controller(5))] == []
    small = _resolved(OutputToken(token=TOKEN_OUT, amount=2_001, recipient=SWAPPER))
    assert [o.amount for o in fee_outputs(small, _controller(5))] == [1]


def test_unpriced_pairs_get_no_row() -> None:
    assert inject_fees(ORDER, _controller(5, token_out=OTHER)) == ORDER
    assert inject_fees(ORDER, _controller(0)) == ORDER


def test_fee_above_cap_rejected() -> None:
    with pytest.raises(FeeTooLarge):
        inject_fees(ORDER, _controller(6))
    assert inject_fees(ORDER, _controller(6), max_fee_bps=10).outputs[3].amount == 900


def test_fee_above_cap_that_rounds_to_zero_is_skipped() -> None:
    tiny = _resolved(OutputToken(token=TOKEN_OUT, amount=1_000, recipient=SWAPPER))
    assert inject_fees(tiny, _controller(6)) == tiny


def test_controller_rejects_out_of_range_rates() -> None:
    controller = StaticFeeController(fee_recipient=FEE_RECIPIENT)
    with pytest.raises(ValueError):
        controller.set_fee(TOKEN_IN, TOKEN_OUT, 10_001)
    with pytest.raises(TypeError):
        controller.set_fee(TOKEN_IN, TOKEN_OUT, True)
