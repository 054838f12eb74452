"""
Per-family order resolution.

Each resolver turns one decoded order plus an `ExecutionContext` into a
`ResolvedOrder` with concrete amounts. Resolution is pure: it reads the
context and asks the injected recoverer about cosignatures, nothing else.

Pipeline per family:

    validate -> [cosigner override] -> [gas adjustment] -> decay
             -> [exclusivity | priority scaling] -> ResolvedOrder

The order hash is always computed over the swapper-signed fields, so
cosigner overrides never change it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Tuple

from ..state.canonical import is_zero_address
from ..state.orders import (
    CosignedDutchOrder,
    DutchInput,
    DutchOrder,
    DutchOutput,
    ExclusiveDutchOrder,
    InputToken,
    LimitOrder,
    Order,
    OrderType,
    OutputToken,
    PiecewiseDutchOrder,
    PriorityOrder,
    ResolvedOrder,
    SignedOrder,
    decode_order,
    order_hash,
)
from .context import ExecutionContext
from .cosigner import apply_input_override, apply_output_overrides, verify_cosignature
from .decay import decay_input, decay_output, piecewise_decay, validate_dutch_legs, validate_piecewise_legs
from .errors import OrderDecodeError, OrderNotFillable
from .exclusivity import apply_exclusivity
from .math import GWEI, Rounding, div_round
from .priority import check_one_sided, priority_fee, scale_input, scale_output
from .signatures import SignatureRecoverer


@dataclass(frozen=True)
class ResolverDeps:
    """Collaborators a resolver may consult."""

    chain_id: str
    recoverer: SignatureRecoverer


ResolveFn = Callable[[Any, str, ExecutionContext, ResolverDeps], ResolvedOrder]


def resolve_limit(order: LimitOrder, signature: str, ctx: ExecutionContext, deps: ResolverDeps) -> ResolvedOrder:
    amount = order.input.amount
    return ResolvedOrder(
        info=order.info,
        input=InputToken(token=order.input.token, amount=amount, max_amount=order.input.max_amount),
        outputs=tuple(order.outputs),
        signature=signature,
        hash=order_hash(order),
    )


def _decay_legs(
    input_leg: DutchInput,
    outputs: Tuple[DutchOutput, ...],
    decay_start: int,
    decay_end: int,
    now: int,
) -> Tuple[InputToken, Tuple[OutputToken, ...]]:
    resolved_in = InputToken(
        token=input_leg.token,
        amount=decay_input(input_leg, decay_start, decay_end, now),
        max_amount=input_leg.max_amount,
    )
    resolved_out = tuple(
        OutputToken(
            token=o.token,
            amount=decay_output(o, decay_start, decay_end, now),
            recipient=o.recipient,
        )
        for o in outputs
    )
    return resolved_in, resolved_out


def resolve_dutch(order: DutchOrder, signature: str, ctx: ExecutionContext, deps: ResolverDeps) -> ResolvedOrder:
    validate_dutch_legs(
        order.input,
        order.outputs,
        decay_start=order.decay_start_time,
        decay_end=order.decay_end_time,
        deadline=order.info.deadline,
    )
    resolved_in, resolved_out = _decay_legs(
        order.input, order.outputs, order.decay_start_time, order.decay_end_time, ctx.timestamp
    )
    return ResolvedOrder(
        info=order.info, input=resolved_in, outputs=resolved_out, signature=signature, hash=order_hash(order)
    )


def resolve_exclusive_dutch(
    order: ExclusiveDutchOrder, signature: str, ctx: ExecutionContext, deps: ResolverDeps
) -> ResolvedOrder:
    validate_dutch_legs(
        order.input,
        order.outputs,
        decay_start=order.decay_start_time,
        decay_end=order.decay_end_time,
        deadline=order.info.deadline,
    )
    resolved_in, resolved_out = _decay_legs(
        order.input, order.outputs, order.decay_start_time, order.decay_end_time, ctx.timestamp
    )
    resolved_out = apply_exclusivity(
        resolved_out,
        exclusive_filler=order.exclusive_filler,
        override_bps=order.exclusivity_override_bps,
        exclusivity_end=order.decay_start_time,
        current=ctx.timestamp,
        caller=ctx.caller,
    )
    return ResolvedOrder(
        info=order.info, input=resolved_in, outputs=resolved_out, signature=signature, hash=order_hash(order)
    )


def resolve_cosigned_dutch(
    order: CosignedDutchOrder, signature: str, ctx: ExecutionContext, deps: ResolverDeps
) -> ResolvedOrder:
    data = order.cosigner_data
    h = order_hash(order)
    validate_dutch_legs(
        order.input,
        order.outputs,
        decay_start=data.decay_start_time,
        decay_end=data.decay_end_time,
        deadline=order.info.deadline,
    )
    verify_cosignature(
        order_hash=h,
        chain_id=deps.chain_id,
        cosigner=order.cosigner,
        cosigner_data=data,
        cosignature=order.cosignature,
        recoverer=deps.recoverer,
    )

    input_leg = replace(order.input, start_amount=apply_input_override(order.input.start_amount, data.input_amount))
    starts = apply_output_overrides([o.start_amount for o in order.outputs], data.output_amounts)
    outputs = tuple(replace(o, start_amount=s) for o, s in zip(order.outputs, starts))

    resolved_in, resolved_out = _decay_legs(input_leg, outputs, data.decay_start_time, data.decay_end_time, ctx.timestamp)
    resolved_out = apply_exclusivity(
        resolved_out,
        exclusive_filler=data.exclusive_filler,
        override_bps=data.exclusivity_override_bps,
        exclusivity_end=data.decay_start_time,
        current=ctx.timestamp,
        caller=ctx.caller,
    )
    return ResolvedOrder(info=order.info, input=resolved_in, outputs=resolved_out, signature=signature, hash=h)


def gas_adjustment(base_fee: int, starting_base_fee: int, adjustment_per_gwei_base_fee: int) -> int:
    """Signed amount delta for a base-fee move, rounded toward -inf."""
    delta = base_fee - starting_base_fee
    return div_round(delta * adjustment_per_gwei_base_fee, GWEI, Rounding.DOWN)


def resolve_piecewise_dutch(
    order: PiecewiseDutchOrder, signature: str, ctx: ExecutionContext, deps: ResolverDeps
) -> ResolvedOrder:
    data = order.cosigner_data
    h = order_hash(order)
    validate_piecewise_legs(order.input, order.outputs)
    verify_cosignature(
        order_hash=h,
        chain_id=deps.chain_id,
        cosigner=order.cosigner,
        cosigner_data=data,
        cosignature=order.cosignature,
        recoverer=deps.recoverer,
    )

    inp = order.input
    in_start = apply_input_override(inp.start_amount, data.input_amount)
    out_starts = apply_output_overrides([o.start_amount for o in order.outputs], data.output_amounts)

    # Input grows and outputs shrink as the base fee rises above the signed level.
    in_start += gas_adjustment(ctx.base_fee, order.starting_base_fee, inp.adjustment_per_gwei_base_fee)
    in_start = max(0, min(in_start, inp.max_amount))
    adjusted_outs: List[int] = []
    for o, start in zip(order.outputs, out_starts):
        start -= gas_adjustment(ctx.base_fee, order.starting_base_fee, o.adjustment_per_gwei_base_fee)
        adjusted_outs.append(max(start, o.min_amount))

    now = ctx.block_number
    resolved_in = InputToken(
        token=inp.token,
        amount=piecewise_decay(
            inp.curve, in_start, data.decay_start_block, now, Rounding.DOWN, max_amount=inp.max_amount
        ),
        max_amount=inp.max_amount,
    )
    resolved_out = tuple(
        OutputToken(
            token=o.token,
            amount=piecewise_decay(
                o.curve, start, data.decay_start_block, now, Rounding.UP, min_amount=o.min_amount
            ),
            recipient=o.recipient,
        )
        for o, start in zip(order.outputs, adjusted_outs)
    )
    resolved_out = apply_exclusivity(
        resolved_out,
        exclusive_filler=data.exclusive_filler,
        override_bps=data.exclusivity_override_bps,
        exclusivity_end=data.decay_start_block,
        current=now,
        caller=ctx.caller,
    )
    return ResolvedOrder(info=order.info, input=resolved_in, outputs=resolved_out, signature=signature, hash=h)


def resolve_priority(order: PriorityOrder, signature: str, ctx: ExecutionContext, deps: ResolverDeps) -> ResolvedOrder:
    check_one_sided(order.input, order.outputs)
    h = order_hash(order)

    auction_start = order.auction_start_block
    if not is_zero_address(order.cosigner):
        verify_cosignature(
            order_hash=h,
            chain_id=deps.chain_id,
            cosigner=order.cosigner,
            cosigner_data=order.cosigner_data,
            cosignature=order.cosignature,
            recoverer=deps.recoverer,
        )
        target = order.cosigner_data.auction_target_block
        if target != 0 and target < auction_start:
            auction_start = target

    if ctx.block_number < auction_start:
        raise OrderNotFillable(f"auction starts at block {auction_start}, current block {ctx.block_number}")

    fee = priority_fee(ctx.gas_price, ctx.base_fee, order.baseline_priority_fee_wei)
    resolved_in = InputToken(
        token=order.input.token,
        amount=scale_input(order.input.amount, order.input.mps_per_priority_fee_wei, fee),
        max_amount=order.input.max_amount,
    )
    resolved_out = tuple(
        OutputToken(
            token=o.token,
            amount=scale_output(o.amount, o.mps_per_priority_fee_wei, fee),
            recipient=o.recipient,
        )
        for o in order.outputs
    )
    return ResolvedOrder(info=order.info, input=resolved_in, outputs=resolved_out, signature=signature, hash=h)


_DISPATCH: Dict[OrderType, ResolveFn] = {
    OrderType.LIMIT: resolve_limit,
    OrderType.DUTCH: resolve_dutch,
    OrderType.EXCLUSIVE_DUTCH: resolve_exclusive_dutch,
    OrderType.COSIGNED_DUTCH: resolve_cosigned_dutch,
    OrderType.PIECEWISE_DUTCH: resolve_piecewise_dutch,
    OrderType.PRIORITY: resolve_priority,
}


def resolve_order(order: Order, signature: str, ctx: ExecutionContext, deps: ResolverDeps) -> ResolvedOrder:
    fn = _DISPATCH.get(order.ORDER_TYPE)
    if fn is None:
        raise OrderDecodeError(f"no resolver for order type {order.ORDER_TYPE}")
    return fn(order, signature, ctx, deps)


def resolve(signed_order: SignedOrder, ctx: ExecutionContext, deps: ResolverDeps) -> ResolvedOrder:
    """Decode `signed_order` and resolve it in `ctx`."""
    return resolve_order(decode_order(signed_order.order), signed_order.signature, ctx, deps)
