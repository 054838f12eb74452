"""Exclusivity resolution.

Until `exclusivity_end` (a timestamp for dutch orders, a block number for
piecewise orders) only the exclusive filler fills at the resolved price.
Anyone else pays `override_bps` extra on every output, or is turned away
when the order is strictly exclusive (``override_bps == 0``).

This is the only place where the caller's identity changes pricing.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, Tuple

from ..state.canonical import canonical_address, is_zero_address
from ..state.orders import OutputToken
from .errors import NoExclusiveOverride
from .math import BPS, mul_div_up


def has_filling_rights(exclusive_filler: str, exclusivity_end: int, current: int, caller: str) -> bool:
    if is_zero_address(exclusive_filler):
        return True
    if current > exclusivity_end:
        return True
    return canonical_address(caller, name="caller") == canonical_address(exclusive_filler)


def apply_exclusivity(
    outputs: Sequence[OutputToken],
    *,
    exclusive_filler: str,
    override_bps: int,
    exclusivity_end: int,
    current: int,
    caller: str,
) -> Tuple[OutputToken, ...]:
    if has_filling_rights(exclusive_filler, exclusivity_end, current, caller):
        return tuple(outputs)
    if override_bps == 0:
        raise NoExclusiveOverride(f"{caller} is not the exclusive filler until {exclusivity_end}")
    return tuple(replace(o, amount=mul_div_up(o.amount, BPS + override_bps, BPS)) for o in outputs)
