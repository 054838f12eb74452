"""Decay evaluation for dutch-style orders.

Two schedule shapes are supported:

- linear, by timestamp: ``(decay_start, decay_end)`` with the amount moving
  from ``start_amount`` to ``end_amount``;
- piecewise-linear, by block: a `DecayCurve` of ``(relative_block,
  relative_amount)`` points anchored at a decay-start block, with an implicit
  ``(0, 0)`` point at the anchor.

Rounding always favors the swapper: inputs (paid by the swapper) round down,
outputs (received by the swapper) round up.

Zero-duration points
--------------------
Several curve points may share one offset. When the elapsed offset lands
exactly on such a run, the *first* point of the run gives the value. One
block later, interpolation starts from the *last* point of the run. This
asymmetry falls out of the "first point with offset >= elapsed" search and is
kept as-is; `tests/core/test_piecewise_decay.py` pins it down.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..state.orders import DecayCurve, DutchInput, DutchOutput, PiecewiseInput, PiecewiseOutput
from .errors import (
    DeadlineBeforeEndTime,
    EndTimeBeforeStartTime,
    IncorrectAmounts,
    InputAndOutputDecay,
    InvalidDecayCurve,
)
from .math import Rounding, interpolate


# -- Linear (time-based) -----------------------------------------------------

def linear_decay(
    start_amount: int,
    end_amount: int,
    decay_start: int,
    decay_end: int,
    now: int,
    rounding: Rounding,
) -> int:
    """Amount at `now` on the straight line from start to end.

    Returns `end_amount` once ``now >= decay_end`` and `start_amount` while
    ``now <= decay_start``.
    """
    if decay_end < decay_start:
        raise EndTimeBeforeStartTime(f"decay_end {decay_end} < decay_start {decay_start}")
    if now >= decay_end:
        return end_amount
    if now <= decay_start:
        return start_amount
    return interpolate(decay_start, decay_end, now, start_amount, end_amount, rounding)


def decay_input(leg: DutchInput, decay_start: int, decay_end: int, now: int) -> int:
    """Input may only decay upward; result rounds down."""
    if leg.start_amount > leg.end_amount:
        raise IncorrectAmounts("input start_amount must be <= end_amount")
    return linear_decay(leg.start_amount, leg.end_amount, decay_start, decay_end, now, Rounding.DOWN)


def decay_output(leg: DutchOutput, decay_start: int, decay_end: int, now: int) -> int:
    """Output may only decay downward; result rounds up."""
    if leg.start_amount < leg.end_amount:
        raise IncorrectAmounts("output start_amount must be >= end_amount")
    return linear_decay(leg.start_amount, leg.end_amount, decay_start, decay_end, now, Rounding.UP)


def validate_dutch_legs(
    input_leg: DutchInput,
    outputs: Sequence[DutchOutput],
    *,
    decay_start: int,
    decay_end: int,
    deadline: int,
) -> None:
    """Reject malformed time-based orders before any amount is evaluated."""
    if decay_end < decay_start:
        raise EndTimeBeforeStartTime(f"decay_end {decay_end} < decay_start {decay_start}")
    if deadline < decay_end:
        raise DeadlineBeforeEndTime(f"deadline {deadline} < decay_end {decay_end}")
    if input_leg.start_amount > input_leg.end_amount:
        raise IncorrectAmounts("input start_amount must be <= end_amount")
    for i, out in enumerate(outputs):
        if out.start_amount < out.end_amount:
            raise IncorrectAmounts(f"outputs[{i}] start_amount must be >= end_amount")
    if input_leg.start_amount != input_leg.end_amount:
        if any(out.start_amount != out.end_amount for out in outputs):
            raise InputAndOutputDecay("input and outputs cannot both decay")


# -- Piecewise (block-based) -------------------------------------------------

def validate_curve(curve: DecayCurve, *, name: str) -> None:
    if len(curve.relative_blocks) != len(curve.relative_amounts):
        raise InvalidDecayCurve(f"{name}: relative_blocks and relative_amounts differ in length")
    blocks = curve.relative_blocks
    for prev, cur in zip(blocks, blocks[1:]):
        if cur < prev:
            raise InvalidDecayCurve(f"{name}: relative_blocks must be non-decreasing")


def validate_piecewise_legs(input_leg: PiecewiseInput, outputs: Sequence[PiecewiseOutput]) -> None:
    validate_curve(input_leg.curve, name="input.curve")
    if input_leg.start_amount > input_leg.max_amount:
        raise IncorrectAmounts("input start_amount must be <= max_amount")
    # amount = start - relative; inputs may only grow.
    if any(a > 0 for a in input_leg.curve.relative_amounts):
        raise IncorrectAmounts("input curve may only increase the amount")
    for i, out in enumerate(outputs):
        validate_curve(out.curve, name=f"outputs[{i}].curve")
        if out.start_amount < out.min_amount:
            raise IncorrectAmounts(f"outputs[{i}] start_amount must be >= min_amount")
        if any(a < 0 for a in out.curve.relative_amounts):
            raise IncorrectAmounts(f"outputs[{i}] curve may only decrease the amount")
    if not input_leg.curve.is_flat() and any(not out.curve.is_flat() for out in outputs):
        raise InputAndOutputDecay("input and outputs cannot both decay")


def locate_curve_position(curve: DecayCurve, elapsed: int) -> Tuple[int, int, int, int]:
    """
    Find the segment containing `elapsed`.

    Returns ``(start_point, end_point, start_relative, end_relative)``. The
    segment ends at the first point whose offset is ``>= elapsed``; past the
    last point the degenerate segment ``(last, last)`` is returned.
    """
    blocks = curve.relative_blocks
    amounts = curve.relative_amounts
    if blocks[0] >= elapsed:
        return 0, blocks[0], 0, amounts[0]
    for i in range(1, len(blocks)):
        if blocks[i] >= elapsed:
            return blocks[i - 1], blocks[i], amounts[i - 1], amounts[i]
    last = len(blocks) - 1
    return blocks[last], blocks[last], amounts[last], amounts[last]


def piecewise_decay(
    curve: DecayCurve,
    start_amount: int,
    decay_start: int,
    now: int,
    rounding: Rounding,
    *,
    min_amount: int = 0,
    max_amount: Optional[int] = None,
) -> int:
    """Amount at block `now`, bounded into ``[min_amount, max_amount]``."""
    validate_curve(curve, name="curve")
    if now <= decay_start or not curve.relative_blocks:
        amount = start_amount
    else:
        elapsed = now - decay_start
        start_point, end_point, start_rel, end_rel = locate_curve_position(curve, elapsed)
        amount = interpolate(
            start_point,
            end_point,
            elapsed,
            start_amount - start_rel,
            start_amount - end_rel,
            rounding,
        )
    amount = max(amount, min_amount, 0)
    if max_amount is not None:
        amount = min(amount, max_amount)
    return amount
