"""Cosigner override validation.

A cosigner signs ``(order_hash, chain_id, cosigner_data)`` after the swapper
signed the order. The cosigner may narrow the auction (shift the decay
window, name an exclusive filler) and may *improve* start amounts for the
swapper. It can never make the swapper pay more or receive less than the
signed base order.
"""

from __future__ import annotations

import hashlib
from typing import Any, List, Sequence

from ..state.canonical import (
    canonical_address,
    canonical_json_bytes,
    domain_sep_bytes,
    encode_bytes,
    hex_to_bytes_fixed,
    is_zero_address,
)
from .errors import InvalidCosignature, InvalidCosignerInput, InvalidCosignerOutput
from .signatures import SignatureRecoverer


def cosigner_digest(order_hash: str, chain_id: str, cosigner_data: Any) -> bytes:
    """SHA-256(domain_sep("cosigner") || order_hash || len-prefixed chain_id || canonical_json(data))."""
    msg = (
        domain_sep_bytes("cosigner", version=1)
        + hex_to_bytes_fixed(order_hash, nbytes=32, name="order_hash")
        + encode_bytes(chain_id.encode("utf-8"))
        + canonical_json_bytes(cosigner_data.to_dict())
    )
    return hashlib.sha256(msg).digest()


def verify_cosignature(
    *,
    order_hash: str,
    chain_id: str,
    cosigner: str,
    cosigner_data: Any,
    cosignature: str,
    recoverer: SignatureRecoverer,
) -> None:
    """
    Raises:
        InvalidCosignature: No cosigner declared, or the signature recovers to
            someone other than the declared cosigner
    """
    if is_zero_address(cosigner):
        raise InvalidCosignature("order declares no cosigner")
    recovered = recoverer.recover(cosigner_digest(order_hash, chain_id, cosigner_data), cosignature)
    if recovered is None or recovered != canonical_address(cosigner, name="cosigner"):
        raise InvalidCosignature(f"cosignature does not recover to {cosigner}")


def apply_input_override(base_start: int, override: int) -> int:
    """Zero means no override. The swapper may never be asked to pay more."""
    if override == 0:
        return base_start
    if override > base_start:
        raise InvalidCosignerInput(f"input override {override} > signed start {base_start}")
    return override


def apply_output_overrides(base_starts: Sequence[int], overrides: Sequence[int]) -> List[int]:
    """Zero entries keep the signed amount. The swapper may never receive less."""
    if len(overrides) != len(base_starts):
        raise InvalidCosignerOutput(
            f"output override count {len(overrides)} != output count {len(base_starts)}"
        )
    out: List[int] = []
    for i, (base, override) in enumerate(zip(base_starts, overrides)):
        if override == 0:
            out.append(base)
            continue
        if override < base:
            raise InvalidCosignerOutput(f"outputs[{i}] override {override} < signed start {base}")
        out.append(override)
    return out
