# [TESTER] v1
"""Shared order builders for the test suite."""

from __future__ import annotations

from typing import Any, Sequence

from fillreactor.agents.order_signer import cosign_order, private_key_from_int, sign_order
from fillreactor.core.context import ExecutionContext
from fillreactor.core.resolvers import ResolverDeps
from fillreactor.core.signatures import Secp256k1Recoverer, address_of
from fillreactor.state.canonical import ZERO_ADDRESS
from fillreactor.state.orders import (
    CosignedDutchOrder,
    CosignerData,
    DecayCurve,
    DutchInput,
    DutchOrder,
    DutchOutput,
    ExclusiveDutchOrder,
    LimitInput,
    LimitOrder,
    OrderInfo,
    OutputToken,
    PiecewiseCosignerData,
    PiecewiseDutchOrder,
    PiecewiseInput,
    PiecewiseOutput,
    PriorityCosignerData,
    PriorityInput,
    PriorityOrder,
    PriorityOutput,
    SignedOrder,
)

CHAIN_ID = "fillreactor-test"

SWAPPER_KEY = private_key_from_int(0xA11CE)
COSIGNER_KEY = private_key_from_int(0xC0516)
STRANGER_KEY = private_key_from_int(0xBAD)
SWAPPER = address_of(SWAPPER_KEY)
COSIGNER = address_of(COSIGNER_KEY)
STRANGER = address_of(STRANGER_KEY)

REACTOR = "0x" + "ee" * 20
FILLER = "0x" + "f1" * 20
OTHER_FILLER = "0x" + "f2" * 20
FEE_RECIPIENT = "0x" + "fe" * 20
TOKEN_IN = "0x" + "aa" * 20
TOKEN_OUT = "0x" + "bb" * 20
TOKEN_OUT_2 = "0x" + "cc" * 20

RECOVERER = Secp256k1Recoverer()


def deps() -> ResolverDeps:
    return ResolverDeps(chain_id=CHAIN_ID, recoverer=RECOVERER)


def ctx(
    *,
    timestamp: int = 1_000,
    block_number: int = 0,
    caller: str = FILLER,
    base_fee: int = 0,
    gas_price: int = 0,
) -> ExecutionContext:
    return ExecutionContext(
        caller=caller,
        timestamp=timestamp,
        block_number=block_number,
        base_fee=base_fee,
        gas_price=gas_price,
    )


def info(
    *,
    nonce: int = 1,
    deadline: int = 100_000,
    reactor: str = REACTOR,
    swapper: str = SWAPPER,
    validation_contract: str = ZERO_ADDRESS,
    validation_data: str = "0x",
) -> OrderInfo:
    return OrderInfo(
        reactor=reactor,
        swapper=swapper,
        nonce=nonce,
        deadline=deadline,
        additional_validation_contract=validation_contract,
        additional_validation_data=validation_data,
    )


def limit_order(
    *,
    amount_in: int = 1_000,
    outputs: Sequence[tuple[str, int]] = ((TOKEN_OUT, 900),),
    recipient: str = SWAPPER,
    **info_kwargs: Any,
) -> LimitOrder:
    return LimitOrder(
        info=info(**info_kwargs),
        input=LimitInput(token=TOKEN_IN, amount=amount_in),
        outputs=tuple(OutputToken(token=t, amount=a, recipient=recipient) for t, a in outputs),
    )


def dutch_input(start: int, end: int) -> DutchInput:
    return DutchInput(token=TOKEN_IN, start_amount=start, end_amount=end)


def dutch_output(start: int, end: int, *, token: str = TOKEN_OUT, recipient: str = SWAPPER) -> DutchOutput:
    return DutchOutput(token=token, start_amount=start, end_amount=end, recipient=recipient)


def dutch_order(
    *,
    decay_start: int = 1_000,
    decay_end: int = 2_000,
    input_leg: DutchInput | None = None,
    outputs: Sequence[DutchOutput] | None = None,
    **info_kwargs: Any,
) -> DutchOrder:
    return DutchOrder(
        info=info(**info_kwargs),
        decay_start_time=decay_start,
        decay_end_time=decay_end,
        input=input_leg or dutch_input(1_000, 1_000),
        outputs=tuple(outputs or (dutch_output(2_000, 1_800),)),
    )


def exclusive_dutch_order(
    *,
    exclusive_filler: str = FILLER,
    override_bps: int = 0,
    decay_start: int = 1_000,
    decay_end: int = 2_000,
    **info_kwargs: Any,
) -> ExclusiveDutchOrder:
    return ExclusiveDutchOrder(
        info=info(**info_kwargs),
        decay_start_time=decay_start,
        decay_end_time=decay_end,
        exclusive_filler=exclusive_filler,
        exclusivity_override_bps=override_bps,
        input=dutch_input(1_000, 1_000),
        outputs=(dutch_output(2_000, 1_800),),
    )


def cosigned_dutch_order(
    *,
    cosigner_data: CosignerData,
    input_leg: DutchInput | None = None,
    outputs: Sequence[DutchOutput] | None = None,
    cosigner_key: bytes = COSIGNER_KEY,
    **info_kwargs: Any,
) -> CosignedDutchOrder:
    base = CosignedDutchOrder(
        info=info(**info_kwargs),
        cosigner=COSIGNER,
        input=input_leg or dutch_input(1_000, 1_000),
        outputs=tuple(outputs or (dutch_output(2_000, 1_800),)),
    )
    return cosign_order(base, cosigner_data, cosigner_key, chain_id=CHAIN_ID)


def piecewise_order(
    *,
    cosigner_data: PiecewiseCosignerData,
    input_leg: PiecewiseInput | None = None,
    outputs: Sequence[PiecewiseOutput] | None = None,
    starting_base_fee: int = 0,
    **info_kwargs: Any,
) -> PiecewiseDutchOrder:
    base = PiecewiseDutchOrder(
        info=info(**info_kwargs),
        cosigner=COSIGNER,
        starting_base_fee=starting_base_fee,
        input=input_leg or PiecewiseInput(token=TOKEN_IN, start_amount=1_000, curve=DecayCurve(), max_amount=1_000),
        outputs=tuple(
            outputs
            or (
                PiecewiseOutput(
                    token=TOKEN_OUT,
                    start_amount=1_000,
                    curve=DecayCurve((10, 10, 20), (100, 200, 300)),
                    recipient=SWAPPER,
                    min_amount=0,
                ),
            )
        ),
    )
    return cosign_order(base, cosigner_data, COSIGNER_KEY, chain_id=CHAIN_ID)


def priority_order(
    *,
    auction_start_block: int = 100,
    baseline_priority_fee_wei: int = 0,
    input_mps: int = 0,
    output_mps: int = 100,
    cosigner_data: PriorityCosignerData | None = None,
    **info_kwargs: Any,
) -> PriorityOrder:
    order = PriorityOrder(
        info=info(**info_kwargs),
        auction_start_block=auction_start_block,
        baseline_priority_fee_wei=baseline_priority_fee_wei,
        input=PriorityInput(token=TOKEN_IN, amount=1_000, mps_per_priority_fee_wei=input_mps),
        outputs=(PriorityOutput(token=TOKEN_OUT, amount=1_000, recipient=SWAPPER, mps_per_priority_fee_wei=output_mps),),
    )
    if cosigner_data is None:
        return order
    order = PriorityOrder(
        info=order.info,
        auction_start_block=order.auction_start_block,
        baseline_priority_fee_wei=order.baseline_priority_fee_wei,
        input=order.input,
        outputs=order.outputs,
        cosigner=COSIGNER,
    )
    return cosign_order(order, cosigner_data, COSIGNER_KEY, chain_id=CHAIN_ID)


def sign(order: Any, key: bytes = SWAPPER_KEY) -> SignedOrder:
    return sign_order(order, key, chain_id=CHAIN_ID)
