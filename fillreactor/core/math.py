"""Pure integer arithmetic for order resolution.

Every function is stateless and operates on plain Python ints. Rounding is
always explicit: `Rounding.DOWN` floors toward -inf, `Rounding.UP` ceils
toward +inf. The caller picks the direction that favors the swapper.
"""

from __future__ import annotations

from enum import Enum, unique

BPS: int = 10_000
MPS: int = 10_000_000  # milli-bps, used by priority-fee scaling
GWEI: int = 1_000_000_000


@unique
class Rounding(Enum):
    DOWN = "down"
    UP = "up"


def div_round(numerator: int, denominator: int, rounding: Rounding) -> int:
    """``numerator / denominator`` rounded toward -inf (DOWN) or +inf (UP)."""
    if denominator <= 0:
        raise ValueError(f"denominator must be positive: {denominator}")
    if rounding is Rounding.DOWN:
        return numerator // denominator
    return -((-numerator) // denominator)


def mul_div_down(x: int, y: int, denominator: int) -> int:
    return div_round(x * y, denominator, Rounding.DOWN)


def mul_div_up(x: int, y: int, denominator: int) -> int:
    return div_round(x * y, denominator, Rounding.UP)


def interpolate(
    start_point: int,
    end_point: int,
    current_point: int,
    start_amount: int,
    end_amount: int,
    rounding: Rounding,
) -> int:
    """Linear interpolation of the amount at `current_point`, clamped to the segment.

    ``start_amount + (end_amount - start_amount) * elapsed / duration``, computed
    as a single exact fraction and rounded once.
    """
    if current_point <= start_point:
        return start_amount
    if current_point >= end_point:
        return end_amount
    duration = end_point - start_point
    elapsed = current_point - start_point
    numerator = start_amount * duration + (end_amount - start_amount) * elapsed
    return div_round(numerator, duration, rounding)


def bound(value: int, lo: int, hi: int) -> int:
    """Clamp *value* into ``[lo, hi]``."""
    if lo > hi:
        raise ValueError(f"empty bound: [{lo}, {hi}]")
    return max(lo, min(value, hi))
