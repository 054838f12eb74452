"""
Order data models for the reactor.

A swapper signs a declarative order; a filler later submits it. Every order
family shares `OrderInfo` and differs in how its input/output legs are
described. Orders travel as canonical JSON bytes (see `encode_order`) tagged
by a `type` field.

Cosigned families carry `cosigner_data` and a `cosignature` inside the
encoded order. Both are produced after the swapper signs, so they are
excluded from the order hash.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, ClassVar, Dict, List, Mapping, Tuple, Type, Union

from ..core.errors import OrderDecodeError
from .canonical import (
    ZERO_ADDRESS,
    canonical_address,
    canonical_json_bytes,
    domain_sep_bytes,
    hex_to_bytes,
    require_int,
    require_uint,
    sha256_hex,
)


@unique
class OrderType(Enum):
    LIMIT = "limit"
    DUTCH = "dutch"
    EXCLUSIVE_DUTCH = "exclusive_dutch"
    COSIGNED_DUTCH = "cosigned_dutch"
    PIECEWISE_DUTCH = "piecewise_dutch"
    PRIORITY = "priority"


# Fields produced by the cosigner, not the swapper.
_UNSIGNED_FIELDS = ("cosigner_data", "cosignature")


def _require_mapping(value: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be an object")
    return value


def _require_list(value: Any, *, name: str) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list")
    return value


def _require_hex(value: Any, *, name: str) -> str:
    hex_to_bytes(value, name=name)
    return value.lower()


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderInfo:
    """
    Fields common to every order family.

    Attributes:
        reactor: Identity of the settlement engine allowed to fill the order
        swapper: Order originator; signs the input pull
        nonce: One-time replay key, unique per swapper
        deadline: Last timestamp at which the order may be filled
        additional_validation_contract: Validator identity, or the zero address
        additional_validation_data: Opaque 0x-hex data passed to the validator
    """

    reactor: str
    swapper: str
    nonce: int
    deadline: int
    additional_validation_contract: str = ZERO_ADDRESS
    additional_validation_data: str = "0x"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reactor": self.reactor,
            "swapper": self.swapper,
            "nonce": self.nonce,
            "deadline": self.deadline,
            "additional_validation_contract": self.additional_validation_contract,
            "additional_validation_data": self.additional_validation_data,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "OrderInfo":
        d = _require_mapping(d, name="info")
        return cls(
            reactor=canonical_address(d.get("reactor"), name="info.reactor"),
            swapper=canonical_address(d.get("swapper"), name="info.swapper"),
            nonce=require_uint(d.get("nonce"), name="info.nonce"),
            deadline=require_uint(d.get("deadline"), name="info.deadline"),
            additional_validation_contract=canonical_address(
                d.get("additional_validation_contract", ZERO_ADDRESS),
                name="info.additional_validation_contract",
            ),
            additional_validation_data=_require_hex(
                d.get("additional_validation_data", "0x"), name="info.additional_validation_data"
            ),
        )


@dataclass(frozen=True)
class InputToken:
    """Resolved input: `amount` is pulled from the swapper, `max_amount` is the signed ceiling."""

    token: str
    amount: int
    max_amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "amount": self.amount, "max_amount": self.max_amount}


@dataclass(frozen=True)
class OutputToken:
    """A concrete output; also the leg type of limit orders."""

    token: str
    amount: int
    recipient: str

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "amount": self.amount, "recipient": self.recipient}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, name: str = "output") -> "OutputToken":
        d = _require_mapping(d, name=name)
        return cls(
            token=canonical_address(d.get("token"), name=f"{name}.token"),
            amount=require_uint(d.get("amount"), name=f"{name}.amount"),
            recipient=canonical_address(d.get("recipient"), name=f"{name}.recipient"),
        )


# ---------------------------------------------------------------------------
# Legs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LimitInput:
    token: str
    amount: int

    @property
    def max_amount(self) -> int:
        return self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "amount": self.amount}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "LimitInput":
        d = _require_mapping(d, name="input")
        return cls(
            token=canonical_address(d.get("token"), name="input.token"),
            amount=require_uint(d.get("amount"), name="input.amount"),
        )


@dataclass(frozen=True)
class DutchInput:
    token: str
    start_amount: int
    end_amount: int

    @property
    def max_amount(self) -> int:
        """Signed input ceiling; inputs only decay upward."""
        return self.end_amount

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "start_amount": self.start_amount, "end_amount": self.end_amount}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DutchInput":
        d = _require_mapping(d, name="input")
        return cls(
            token=canonical_address(d.get("token"), name="input.token"),
            start_amount=require_uint(d.get("start_amount"), name="input.start_amount"),
            end_amount=require_uint(d.get("end_amount"), name="input.end_amount"),
        )


@dataclass(frozen=True)
class DutchOutput:
    token: str
    start_amount: int
    end_amount: int
    recipient: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "start_amount": self.start_amount,
            "end_amount": self.end_amount,
            "recipient": self.recipient,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, name: str = "output") -> "DutchOutput":
        d = _require_mapping(d, name=name)
        return cls(
            token=canonical_address(d.get("token"), name=f"{name}.token"),
            start_amount=require_uint(d.get("start_amount"), name=f"{name}.start_amount"),
            end_amount=require_uint(d.get("end_amount"), name=f"{name}.end_amount"),
            recipient=canonical_address(d.get("recipient"), name=f"{name}.recipient"),
        )


@dataclass(frozen=True)
class DecayCurve:
    """
    Piecewise-linear decay curve, anchored at a decay-start block.

    `relative_blocks[i]` is a block offset from the anchor and
    `relative_amounts[i]` the amount subtracted from the leg's start amount at
    that offset (negative values increase the amount).
    """

    relative_blocks: Tuple[int, ...] = ()
    relative_amounts: Tuple[int, ...] = ()

    def is_flat(self) -> bool:
        return all(a == 0 for a in self.relative_amounts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "relative_blocks": list(self.relative_blocks),
            "relative_amounts": list(self.relative_amounts),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, name: str = "curve") -> "DecayCurve":
        d = _require_mapping(d, name=name)
        blocks = _require_list(d.get("relative_blocks", []), name=f"{name}.relative_blocks")
        amounts = _require_list(d.get("relative_amounts", []), name=f"{name}.relative_amounts")
        return cls(
            relative_blocks=tuple(require_uint(b, name=f"{name}.relative_blocks[]") for b in blocks),
            relative_amounts=tuple(require_int(a, name=f"{name}.relative_amounts[]") for a in amounts),
        )


@dataclass(frozen=True)
class PiecewiseInput:
    token: str
    start_amount: int
    curve: DecayCurve
    max_amount: int
    adjustment_per_gwei_base_fee: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "start_amount": self.start_amount,
            "curve": self.curve.to_dict(),
            "max_amount": self.max_amount,
            "adjustment_per_gwei_base_fee": self.adjustment_per_gwei_base_fee,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PiecewiseInput":
        d = _require_mapping(d, name="input")
        return cls(
            token=canonical_address(d.get("token"), name="input.token"),
            start_amount=require_uint(d.get("start_amount"), name="input.start_amount"),
            curve=DecayCurve.from_dict(d.get("curve", {}), name="input.curve"),
            max_amount=require_uint(d.get("max_amount"), name="input.max_amount"),
            adjustment_per_gwei_base_fee=require_uint(
                d.get("adjustment_per_gwei_base_fee", 0), name="input.adjustment_per_gwei_base_fee"
            ),
        )


@dataclass(frozen=True)
class PiecewiseOutput:
    token: str
    start_amount: int
    curve: DecayCurve
    recipient: str
    min_amount: int
    adjustment_per_gwei_base_fee: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "start_amount": self.start_amount,
            "curve": self.curve.to_dict(),
            "recipient": self.recipient,
            "min_amount": self.min_amount,
            "adjustment_per_gwei_base_fee": self.adjustment_per_gwei_base_fee,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, name: str = "output") -> "PiecewiseOutput":
        d = _require_mapping(d, name=name)
        return cls(
            token=canonical_address(d.get("token"), name=f"{name}.token"),
            start_amount=require_uint(d.get("start_amount"), name=f"{name}.start_amount"),
            curve=DecayCurve.from_dict(d.get("curve", {}), name=f"{name}.curve"),
            recipient=canonical_address(d.get("recipient"), name=f"{name}.recipient"),
            min_amount=require_uint(d.get("min_amount"), name=f"{name}.min_amount"),
            adjustment_per_gwei_base_fee=require_uint(
                d.get("adjustment_per_gwei_base_fee", 0), name=f"{name}.adjustment_per_gwei_base_fee"
            ),
        )


@dataclass(frozen=True)
class PriorityInput:
    token: str
    amount: int
    mps_per_priority_fee_wei: int = 0

    @property
    def max_amount(self) -> int:
        return self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "amount": self.amount,
            "mps_per_priority_fee_wei": self.mps_per_priority_fee_wei,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PriorityInput":
        d = _require_mapping(d, name="input")
        return cls(
            token=canonical_address(d.get("token"), name="input.token"),
            amount=require_uint(d.get("amount"), name="input.amount"),
            mps_per_priority_fee_wei=require_uint(
                d.get("mps_per_priority_fee_wei", 0), name="input.mps_per_priority_fee_wei"
            ),
        )


@dataclass(frozen=True)
class PriorityOutput:
    token: str
    amount: int
    recipient: str
    mps_per_priority_fee_wei: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "amount": self.amount,
            "recipient": self.recipient,
            "mps_per_priority_fee_wei": self.mps_per_priority_fee_wei,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], *, name: str = "output") -> "PriorityOutput":
        d = _require_mapping(d, name=name)
        return cls(
            token=canonical_address(d.get("token"), name=f"{name}.token"),
            amount=require_uint(d.get("amount"), name=f"{name}.amount"),
            recipient=canonical_address(d.get("recipient"), name=f"{name}.recipient"),
            mps_per_priority_fee_wei=require_uint(
                d.get("mps_per_priority_fee_wei", 0), name=f"{name}.mps_per_priority_fee_wei"
            ),
        )


# ---------------------------------------------------------------------------
# Cosigner data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CosignerData:
    """Auction parameters a cosigner attaches to a cosigned dutch order."""

    decay_start_time: int = 0
    decay_end_time: int = 0
    exclusive_filler: str = ZERO_ADDRESS
    exclusivity_override_bps: int = 0
    input_amount: int = 0
    output_amounts: Tuple[int, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decay_start_time": self.decay_start_time,
            "decay_end_time": self.decay_end_time,
            "exclusive_filler": self.exclusive_filler,
            "exclusivity_override_bps": self.exclusivity_override_bps,
            "input_amount": self.input_amount,
            "output_amounts": list(self.output_amounts),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CosignerData":
        d = _require_mapping(d, name="cosigner_data")
        amounts = _require_list(d.get("output_amounts", []), name="cosigner_data.output_amounts")
        return cls(
            decay_start_time=require_uint(d.get("decay_start_time", 0), name="cosigner_data.decay_start_time"),
            decay_end_time=require_uint(d.get("decay_end_time", 0), name="cosigner_data.decay_end_time"),
            exclusive_filler=canonical_address(
                d.get("exclusive_filler", ZERO_ADDRESS), name="cosigner_data.exclusive_filler"
            ),
            exclusivity_override_bps=require_uint(
                d.get("exclusivity_override_bps", 0), name="cosigner_data.exclusivity_override_bps"
            ),
            input_amount=require_uint(d.get("input_amount", 0), name="cosigner_data.input_amount"),
            output_amounts=tuple(require_uint(a, name="cosigner_data.output_amounts[]") for a in amounts),
        )


@dataclass(frozen=True)
class PiecewiseCosignerData:
    """Cosigner parameters for block-based piecewise orders."""

    decay_start_block: int = 0
    exclusive_filler: str = ZERO_ADDRESS
    exclusivity_override_bps: int = 0
    input_amount: int = 0
    output_amounts: Tuple[int, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decay_start_block": self.decay_start_block,
            "exclusive_filler": self.exclusive_filler,
            "exclusivity_override_bps": self.exclusivity_override_bps,
            "input_amount": self.input_amount,
            "output_amounts": list(self.output_amounts),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PiecewiseCosignerData":
        d = _require_mapping(d, name="cosigner_data")
        amounts = _require_list(d.get("output_amounts", []), name="cosigner_data.output_amounts")
        return cls(
            decay_start_block=require_uint(d.get("decay_start_block", 0), name="cosigner_data.decay_start_block"),
            exclusive_filler=canonical_address(
                d.get("exclusive_filler", ZERO_ADDRESS), name="cosigner_data.exclusive_filler"
            ),
            exclusivity_override_bps=require_uint(
                d.get("exclusivity_override_bps", 0), name="cosigner_data.exclusivity_override_bps"
            ),
            input_amount=require_uint(d.get("input_amount", 0), name="cosigner_data.input_amount"),
            output_amounts=tuple(require_uint(a, name="cosigner_data.output_amounts[]") for a in amounts),
        )


@dataclass(frozen=True)
class PriorityCosignerData:
    auction_target_block: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"auction_target_block": self.auction_target_block}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PriorityCosignerData":
        d = _require_mapping(d, name="cosigner_data")
        return cls(
            auction_target_block=require_uint(
                d.get("auction_target_block", 0), name="cosigner_data.auction_target_block"
            ),
        )


# ---------------------------------------------------------------------------
# Order families
# ---------------------------------------------------------------------------


def _outputs(d: Mapping[str, Any], leg: Any) -> Tuple[Any, ...]:
    raw = _require_list(d.get("outputs"), name="outputs")
    return tuple(leg.from_dict(o, name=f"outputs[{i}]") for i, o in enumerate(raw))


@dataclass(frozen=True)
class LimitOrder:
    ORDER_TYPE: ClassVar[OrderType] = OrderType.LIMIT

    info: OrderInfo
    input: LimitInput
    outputs: Tuple[OutputToken, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.ORDER_TYPE.value,
            "info": self.info.to_dict(),
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "LimitOrder":
        return cls(
            info=OrderInfo.from_dict(d.get("info")),
            input=LimitInput.from_dict(d.get("input")),
            outputs=_outputs(d, OutputToken),
        )


@dataclass(frozen=True)
class DutchOrder:
    """Time-decaying order with no exclusivity and no cosigner."""

    ORDER_TYPE: ClassVar[OrderType] = OrderType.DUTCH

    info: OrderInfo
    decay_start_time: int
    decay_end_time: int
    input: DutchInput
    outputs: Tuple[DutchOutput, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.ORDER_TYPE.value,
            "info": self.info.to_dict(),
            "decay_start_time": self.decay_start_time,
            "decay_end_time": self.decay_end_time,
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DutchOrder":
        return cls(
            info=OrderInfo.from_dict(d.get("info")),
            decay_start_time=require_uint(d.get("decay_start_time"), name="decay_start_time"),
            decay_end_time=require_uint(d.get("decay_end_time"), name="decay_end_time"),
            input=DutchInput.from_dict(d.get("input")),
            outputs=_outputs(d, DutchOutput),
        )


@dataclass(frozen=True)
class ExclusiveDutchOrder:
    """Dutch order whose exclusivity window ends at `decay_start_time`."""

    ORDER_TYPE: ClassVar[OrderType] = OrderType.EXCLUSIVE_DUTCH

    info: OrderInfo
    decay_start_time: int
    decay_end_time: int
    exclusive_filler: str
    exclusivity_override_bps: int
    input: DutchInput
    outputs: Tuple[DutchOutput, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.ORDER_TYPE.value,
            "info": self.info.to_dict(),
            "decay_start_time": self.decay_start_time,
            "decay_end_time": self.decay_end_time,
            "exclusive_filler": self.exclusive_filler,
            "exclusivity_override_bps": self.exclusivity_override_bps,
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ExclusiveDutchOrder":
        return cls(
            info=OrderInfo.from_dict(d.get("info")),
            decay_start_time=require_uint(d.get("decay_start_time"), name="decay_start_time"),
            decay_end_time=require_uint(d.get("decay_end_time"), name="decay_end_time"),
            exclusive_filler=canonical_address(d.get("exclusive_filler", ZERO_ADDRESS), name="exclusive_filler"),
            exclusivity_override_bps=require_uint(
                d.get("exclusivity_override_bps", 0), name="exclusivity_override_bps"
            ),
            input=DutchInput.from_dict(d.get("input")),
            outputs=_outputs(d, DutchOutput),
        )


@dataclass(frozen=True)
class CosignedDutchOrder:
    """
    Dutch order whose decay window, exclusivity and (improved) start amounts
    are supplied by a cosigner at fill time.
    """

    ORDER_TYPE: ClassVar[OrderType] = OrderType.COSIGNED_DUTCH

    info: OrderInfo
    cosigner: str
    input: DutchInput
    outputs: Tuple[DutchOutput, ...]
    cosigner_data: CosignerData = field(default_factory=CosignerData)
    cosignature: str = "0x"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.ORDER_TYPE.value,
            "info": self.info.to_dict(),
            "cosigner": self.cosigner,
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
            "cosigner_data": self.cosigner_data.to_dict(),
            "cosignature": self.cosignature,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CosignedDutchOrder":
        return cls(
            info=OrderInfo.from_dict(d.get("info")),
            cosigner=canonical_address(d.get("cosigner"), name="cosigner"),
            input=DutchInput.from_dict(d.get("input")),
            outputs=_outputs(d, DutchOutput),
            cosigner_data=CosignerData.from_dict(d.get("cosigner_data", {})),
            cosignature=_require_hex(d.get("cosignature", "0x"), name="cosignature"),
        )


@dataclass(frozen=True)
class PiecewiseDutchOrder:
    """
    Block-based order with piecewise-linear decay curves and base-fee
    adjustment. Decay start and exclusivity come from the cosigner.
    """

    ORDER_TYPE: ClassVar[OrderType] = OrderType.PIECEWISE_DUTCH

    info: OrderInfo
    cosigner: str
    starting_base_fee: int
    input: PiecewiseInput
    outputs: Tuple[PiecewiseOutput, ...]
    cosigner_data: PiecewiseCosignerData = field(default_factory=PiecewiseCosignerData)
    cosignature: str = "0x"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.ORDER_TYPE.value,
            "info": self.info.to_dict(),
            "cosigner": self.cosigner,
            "starting_base_fee": self.starting_base_fee,
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
            "cosigner_data": self.cosigner_data.to_dict(),
            "cosignature": self.cosignature,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PiecewiseDutchOrder":
        return cls(
            info=OrderInfo.from_dict(d.get("info")),
            cosigner=canonical_address(d.get("cosigner"), name="cosigner"),
            starting_base_fee=require_uint(d.get("starting_base_fee", 0), name="starting_base_fee"),
            input=PiecewiseInput.from_dict(d.get("input")),
            outputs=_outputs(d, PiecewiseOutput),
            cosigner_data=PiecewiseCosignerData.from_dict(d.get("cosigner_data", {})),
            cosignature=_require_hex(d.get("cosignature", "0x"), name="cosignature"),
        )


@dataclass(frozen=True)
class PriorityOrder:
    """Order priced by the priority fee the filler pays above a baseline."""

    ORDER_TYPE: ClassVar[OrderType] = OrderType.PRIORITY

    info: OrderInfo
    auction_start_block: int
    baseline_priority_fee_wei: int
    input: PriorityInput
    outputs: Tuple[PriorityOutput, ...]
    cosigner: str = ZERO_ADDRESS
    cosigner_data: PriorityCosignerData = field(default_factory=PriorityCosignerData)
    cosignature: str = "0x"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.ORDER_TYPE.value,
            "info": self.info.to_dict(),
            "cosigner": self.cosigner,
            "auction_start_block": self.auction_start_block,
            "baseline_priority_fee_wei": self.baseline_priority_fee_wei,
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
            "cosigner_data": self.cosigner_data.to_dict(),
            "cosignature": self.cosignature,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PriorityOrder":
        return cls(
            info=OrderInfo.from_dict(d.get("info")),
            cosigner=canonical_address(d.get("cosigner", ZERO_ADDRESS), name="cosigner"),
            auction_start_block=require_uint(d.get("auction_start_block"), name="auction_start_block"),
            baseline_priority_fee_wei=require_uint(
                d.get("baseline_priority_fee_wei", 0), name="baseline_priority_fee_wei"
            ),
            input=PriorityInput.from_dict(d.get("input")),
            outputs=_outputs(d, PriorityOutput),
            cosigner_data=PriorityCosignerData.from_dict(d.get("cosigner_data", {})),
            cosignature=_require_hex(d.get("cosignature", "0x"), name="cosignature"),
        )


Order = Union[
    LimitOrder,
    DutchOrder,
    ExclusiveDutchOrder,
    CosignedDutchOrder,
    PiecewiseDutchOrder,
    PriorityOrder,
]

ORDER_CLASSES: Dict[OrderType, Type[Any]] = {
    OrderType.LIMIT: LimitOrder,
    OrderType.DUTCH: DutchOrder,
    OrderType.EXCLUSIVE_DUTCH: ExclusiveDutchOrder,
    OrderType.COSIGNED_DUTCH: CosignedDutchOrder,
    OrderType.PIECEWISE_DUTCH: PiecewiseDutchOrder,
    OrderType.PRIORITY: PriorityOrder,
}


# ---------------------------------------------------------------------------
# Codec and hashing
# ---------------------------------------------------------------------------


def encode_order(order: Order) -> bytes:
    return canonical_json_bytes(order.to_dict())


def decode_order(data: bytes) -> Order:
    """
    Decode canonical order bytes into a typed order.

    Raises:
        OrderDecodeError: Not JSON, unknown `type`, or any field fails validation
    """
    if not isinstance(data, (bytes, bytearray)):
        raise OrderDecodeError("order must be bytes")
    try:
        raw = json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise OrderDecodeError(f"order is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise OrderDecodeError("order must be a JSON object")

    try:
        order_type = OrderType(raw.get("type"))
    except ValueError as exc:
        raise OrderDecodeError(f"unknown order type: {raw.get('type')!r}") from exc

    try:
        return ORDER_CLASSES[order_type].from_dict(raw)
    except (TypeError, ValueError) as exc:
        raise OrderDecodeError(f"invalid {order_type.value} order: {exc}") from exc


def signed_fields(order: Order) -> Dict[str, Any]:
    """The part of the order the swapper's signature covers."""
    d = order.to_dict()
    for key in _UNSIGNED_FIELDS:
        d.pop(key, None)
    return d


def order_hash(order: Order) -> str:
    """
    H(domain_sep("order:<type>") || canonical_json(signed_fields)).

    Cosigner overrides never change this value.
    """
    domain = domain_sep_bytes(f"order:{order.ORDER_TYPE.value}", version=1)
    return sha256_hex(domain + canonical_json_bytes(signed_fields(order)))


@dataclass(frozen=True)
class SignedOrder:
    """
    Encoded order plus the swapper's signature.

    Attributes:
        order: Canonical JSON bytes from `encode_order`
        signature: 0x-hex recoverable signature over the permit digest
    """

    order: bytes
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {"order": json.loads(self.order.decode("utf-8")), "signature": self.signature}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SignedOrder":
        d = _require_mapping(d, name="signed_order")
        order = d.get("order")
        if isinstance(order, Mapping):
            order_bytes = canonical_json_bytes(dict(order))
        elif isinstance(order, str):
            order_bytes = order.encode("utf-8")
        else:
            raise TypeError("signed_order.order must be an object or a JSON string")
        signature = d.get("signature")
        if not isinstance(signature, str):
            raise TypeError("signed_order.signature must be a str")
        return cls(order=order_bytes, signature=signature)


@dataclass(frozen=True)
class ResolvedOrder:
    """
    Concrete amounts for one settlement attempt.

    Created by a resolver, optionally extended with fee outputs, and discarded
    when the settlement call returns.
    """

    info: OrderInfo
    input: InputToken
    outputs: Tuple[OutputToken, ...]
    signature: str
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "info": self.info.to_dict(),
            "input": self.input.to_dict(),
            "outputs": [o.to_dict() for o in self.outputs],
            "signature": self.signature,
            "hash": self.hash,
        }
