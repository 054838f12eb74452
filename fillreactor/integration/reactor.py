"""
Settlement engine.

This is the imperative shell around the pure resolvers in `core/`:
- resolves every signed order in a batch against one `ExecutionContext`;
- appends protocol fee rows, re-checks routing, deadline and any additional
  validator, consumes nonces and pulls inputs from swappers to the filler;
- hands the whole batch to the filler's strategy once;
- pushes every output from the filler to its recipient.

A batch is all-or-nothing: the nonce store and the transfer service are
checkpointed before the first state change and rolled back on any failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from ..core.context import ExecutionContext
from ..core.errors import (
    BatchTooLarge,
    DeadlinePassed,
    InvalidReactor,
    NonceAlreadyUsed,
    OrderDecodeError,
    ReentrantCall,
)
from ..core.fees import FeeController, inject_fees
from ..core.resolvers import ResolverDeps, resolve
from ..core.signatures import SignatureRecoverer
from ..state.canonical import canonical_address
from ..state.nonces import NonceStore
from ..state.orders import ResolvedOrder, SignedOrder
from .config import ReactorConfig
from .transfers import TransferService
from .validation import OrderValidator, run_additional_validation


logger = logging.getLogger(__name__)


class FillStrategy(Protocol):
    def reactor_callback(self, resolved_orders: Sequence[ResolvedOrder], fill_data: bytes) -> None:
        """Called once per batch, after every input has been pulled to the filler."""
        ...


@dataclass(frozen=True)
class Fill:
    """Record of one settled order."""

    order_hash: str
    filler: str
    swapper: str
    nonce: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_hash": self.order_hash,
            "filler": self.filler,
            "swapper": self.swapper,
            "nonce": self.nonce,
        }


class SettlementEngine:
    def __init__(
        self,
        config: ReactorConfig,
        transfers: TransferService,
        nonces: NonceStore,
        recoverer: SignatureRecoverer,
        fee_controller: Optional[FeeController] = None,
        validators: Optional[Mapping[str, OrderValidator]] = None,
    ) -> None:
        self.config = config
        self.transfers = transfers
        self.nonces = nonces
        self.fee_controller = fee_controller
        self.validators: Dict[str, OrderValidator] = {
            canonical_address(k, name="validator"): v for k, v in (validators or {}).items()
        }
        self._deps = ResolverDeps(chain_id=config.chain_id, recoverer=recoverer)
        self._in_flight = False

    # -- entry points --------------------------------------------------------

    def execute(
        self,
        signed_order: SignedOrder,
        ctx: ExecutionContext,
        strategy: Optional[FillStrategy] = None,
        fill_data: bytes = b"",
    ) -> Fill:
        """Settle one order. `strategy=None` fills directly from the caller's balance."""
        return self.execute_batch([signed_order], ctx, strategy, fill_data)[0]

    def execute_batch(
        self,
        signed_orders: Sequence[SignedOrder],
        ctx: ExecutionContext,
        strategy: Optional[FillStrategy] = None,
        fill_data: bytes = b"",
    ) -> List[Fill]:
        """
        Settle a batch atomically.

        Raises:
            ReentrantCall: Called while another batch is in flight
            BatchTooLarge: More than `config.max_batch_size` orders
            ReactorError: Any resolution or settlement failure; no state changes
        """
        if self._in_flight:
            raise ReentrantCall("settlement already in progress")
        self._in_flight = True
        try:
            return self._settle(list(signed_orders), ctx, strategy, fill_data)
        finally:
            self._in_flight = False

    def quote(self, signed_order: SignedOrder, ctx: ExecutionContext) -> ResolvedOrder:
        """
        Resolve and validate one order as `execute` would, without moving
        tokens or consuming the nonce.
        """
        resolved = self._prepare(self._resolve_all([signed_order], ctx)[0], ctx)
        if self.nonces.is_used(resolved.info.swapper, resolved.info.nonce):
            raise NonceAlreadyUsed(resolved.info.swapper, resolved.info.nonce)
        return resolved

    # -- internals -----------------------------------------------------------

    def _resolve_all(self, signed_orders: Sequence[SignedOrder], ctx: ExecutionContext) -> List[ResolvedOrder]:
        if len(signed_orders) > self.config.max_batch_size:
            raise BatchTooLarge(f"{len(signed_orders)} orders > max_batch_size {self.config.max_batch_size}")
        resolved: List[ResolvedOrder] = []
        for i, signed in enumerate(signed_orders):
            if len(signed.order) > self.config.max_order_bytes:
                raise OrderDecodeError(
                    f"orders[{i}] is {len(signed.order)} bytes > max_order_bytes {self.config.max_order_bytes}"
                )
            resolved.append(resolve(signed, ctx, self._deps))
        return resolved

    def _prepare(self, order: ResolvedOrder, ctx: ExecutionContext) -> ResolvedOrder:
        order = inject_fees(order, self.fee_controller, max_fee_bps=self.config.max_fee_bps)
        if order.info.reactor != self.config.address:
            raise InvalidReactor(f"order targets {order.info.reactor}, not {self.config.address}")
        if ctx.timestamp > order.info.deadline:
            raise DeadlinePassed(f"deadline {order.info.deadline} < now {ctx.timestamp}")
        run_additional_validation(order.info, self.validators)
        return order

    def _pull_input(self, order: ResolvedOrder, ctx: ExecutionContext) -> None:
        self.transfers.pull_with_signature(
            owner=order.info.swapper,
            spender=self.config.address,
            token=order.input.token,
            amount=order.input.amount,
            max_amount=order.input.max_amount,
            nonce=order.info.nonce,
            deadline=order.info.deadline,
            witness_hash=order.hash,
            signature=order.signature,
            to=ctx.caller,
        )

    def _settle(
        self,
        signed_orders: List[SignedOrder],
        ctx: ExecutionContext,
        strategy: Optional[FillStrategy],
        fill_data: bytes,
    ) -> List[Fill]:
        logger.debug("settling batch of %d orders for %s", len(signed_orders), ctx.caller)
        resolved = self._resolve_all(signed_orders, ctx)

        nonce_cp = self.nonces.checkpoint()
        transfer_cp = self.transfers.checkpoint()
        try:
            prepared: List[ResolvedOrder] = []
            for order in resolved:
                order = self._prepare(order, ctx)
                self.nonces.consume(order.info.swapper, order.info.nonce)
                self._pull_input(order, ctx)
                prepared.append(order)

            if strategy is not None:
                strategy.reactor_callback(tuple(prepared), fill_data)

            for order in prepared:
                for out in order.outputs:
                    self.transfers.push_transfer_from(ctx.caller, out.recipient, out.token, out.amount)
        except Exception as exc:
            logger.warning("batch of %d orders rolled back: %s: %s", len(resolved), type(exc).__name__, exc)
            self.nonces.rollback(nonce_cp)
            self.transfers.rollback(transfer_cp)
            raise
        self.nonces.commit(nonce_cp)
        self.transfers.commit(transfer_cp)

        fills = [
            Fill(order_hash=o.hash, filler=ctx.caller, swapper=o.info.swapper, nonce=o.info.nonce)
            for o in prepared
        ]
        for fill in fills:
            logger.info(
                "fill order=%s filler=%s swapper=%s nonce=%d",
                fill.order_hash,
                fill.filler,
                fill.swapper,
                fill.nonce,
            )
        logger.debug("batch of %d orders settled", len(fills))
        return fills
