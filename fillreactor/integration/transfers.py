"""
Token movement for the settlement engine.

The engine never touches balances itself. Every pull and push goes through a
`TransferService`; `InMemoryTokenLedger` is the reference implementation used
by tests, the CLI and off-chain simulation.

Permit model: the swapper signs one permit digest per order, scoped to the
engine identity (`spender`), capped at the signed input ceiling
(`max_amount`) and bound to the order by `witness_hash` (the order hash).
One signature authorizes exactly one pull: the ledger remembers every
`(owner, nonce)` permit it has honoured.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, Tuple

from ..core.errors import InsufficientBalance, InvalidSignature, NonceAlreadyUsed, PermitAmountExceeded
from ..core.signatures import Secp256k1Recoverer, SignatureRecoverer
from ..state.balances import BalanceTable
from ..state.canonical import canonical_address, canonical_json_bytes, domain_sep_bytes, require_uint
from ..state.nonces import NonceStore


logger = logging.getLogger(__name__)


def permit_digest(
    *,
    chain_id: str,
    token: str,
    spender: str,
    max_amount: int,
    nonce: int,
    deadline: int,
    witness_hash: str,
) -> bytes:
    payload = {
        "chain_id": chain_id,
        "token": canonical_address(token, name="token"),
        "spender": canonical_address(spender, name="spender"),
        "max_amount": require_uint(max_amount, name="max_amount"),
        "nonce": require_uint(nonce, name="nonce"),
        "deadline": require_uint(deadline, name="deadline"),
        "witness": witness_hash,
    }
    return hashlib.sha256(domain_sep_bytes("permit_witness", version=1) + canonical_json_bytes(payload)).digest()


class TransferService(Protocol):
    def pull_with_signature(
        self,
        owner: str,
        spender: str,
        token: str,
        amount: int,
        max_amount: int,
        nonce: int,
        deadline: int,
        witness_hash: str,
        signature: str,
        *,
        to: str,
    ) -> None:
        ...

    def push_transfer_from(self, owner: str, recipient: str, token: str, amount: int) -> None:
        ...

    def checkpoint(self) -> Any:
        ...

    def rollback(self, checkpoint: Any) -> None:
        ...

    def commit(self, checkpoint: Any) -> None:
        ...


_Checkpoint = Tuple[int, int]


@dataclass
class InMemoryTokenLedger:
    """`TransferService` over a `BalanceTable`, verifying swapper permits."""

    chain_id: str
    recoverer: SignatureRecoverer = field(default_factory=Secp256k1Recoverer)
    balances: BalanceTable = field(default_factory=BalanceTable)
    permits: NonceStore = field(default_factory=NonceStore)

    def mint(self, owner: str, token: str, amount: int) -> None:
        self.balances.add(
            canonical_address(owner, name="owner"),
            canonical_address(token, name="token"),
            require_uint(amount, name="amount"),
        )

    def balance_of(self, owner: str, token: str) -> int:
        return self.balances.get(canonical_address(owner, name="owner"), canonical_address(token, name="token"))

    def _move(self, src: str, dst: str, token: str, amount: int) -> None:
        src = canonical_address(src, name="from")
        dst = canonical_address(dst, name="to")
        token = canonical_address(token, name="token")
        require_uint(amount, name="amount")
        if amount == 0:
            return
        balance = self.balances.get(src, token)
        if balance < amount:
            raise InsufficientBalance(src, token, balance, amount)
        self.balances.subtract(src, token, amount)
        self.balances.add(dst, token, amount)
        logger.debug("transfer %s %s: %s -> %s", amount, token, src, dst)

    def pull_with_signature(
        self,
        owner: str,
        spender: str,
        token: str,
        amount: int,
        max_amount: int,
        nonce: int,
        deadline: int,
        witness_hash: str,
        signature: str,
        *,
        to: str,
    ) -> None:
        """
        Move `amount` of `token` from `owner` to `to` under the owner's permit.

        Raises:
            PermitAmountExceeded: `amount` is above the signed `max_amount`
            InvalidSignature: The permit does not recover to `owner`
            NonceAlreadyUsed: This `(owner, nonce)` permit was already honoured
            InsufficientBalance: `owner` holds less than `amount`
        """
        if amount > max_amount:
            raise PermitAmountExceeded(f"pull of {amount} exceeds signed max_amount {max_amount}")
        digest = permit_digest(
            chain_id=self.chain_id,
            token=token,
            spender=spender,
            max_amount=max_amount,
            nonce=nonce,
            deadline=deadline,
            witness_hash=witness_hash,
        )
        owner = canonical_address(owner, name="owner")
        signer = self.recoverer.recover(digest, signature)
        if signer is None or signer != owner:
            raise InvalidSignature(f"permit for witness {witness_hash} not signed by {owner}")
        if self.permits.is_used(owner, nonce):
            raise NonceAlreadyUsed(owner, nonce)
        self._move(owner, to, token, amount)
        self.permits.consume(owner, nonce)

    def push_transfer_from(self, owner: str, recipient: str, token: str, amount: int) -> None:
        self._move(owner, recipient, token, amount)

    def checkpoint(self) -> _Checkpoint:
        return self.balances.checkpoint(), self.permits.checkpoint()

    def rollback(self, checkpoint: _Checkpoint) -> None:
        balances_cp, permits_cp = checkpoint
        self.balances.rollback(balances_cp)
        self.permits.rollback(permits_cp)

    def commit(self, checkpoint: _Checkpoint) -> None:
        balances_cp, permits_cp = checkpoint
        self.balances.commit(balances_cp)
        self.permits.commit(permits_cp)
