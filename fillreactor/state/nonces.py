"""
Nonce table for replay protection.

Every order carries a `(swapper, nonce)` pair. A pair is consumed the first
time an order using it settles and can never be consumed again; it is the
only shared mutable resource racing fillers contend on. Nonces are unordered:
any unused value may be consumed at any time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from ..core.errors import NonceAlreadyUsed
from .canonical import canonical_address, require_uint


_Key = Tuple[str, int]


@dataclass
class NonceStore:
    """
    Mutable set of consumed `(swapper, nonce)` keys.

    Starts empty and is never torn down. While a checkpoint is open every newly
    consumed key is appended to an undo log, so `rollback` costs only what
    was consumed since the checkpoint. Checkpoints nest; committing or rolling
    back the outermost one closes the log.
    """

    _used: Set[_Key] = field(default_factory=set)
    _undo: Optional[List[_Key]] = field(default=None, repr=False)

    def _key(self, swapper: str, nonce: int) -> _Key:
        return canonical_address(swapper, name="swapper"), require_uint(nonce, name="nonce")

    def _mark(self, key: _Key) -> None:
        self._used.add(key)
        if self._undo is not None:
            self._undo.append(key)

    def is_used(self, swapper: str, nonce: int) -> bool:
        return self._key(swapper, nonce) in self._used

    def consume(self, swapper: str, nonce: int) -> None:
        key = self._key(swapper, nonce)
        if key in self._used:
            raise NonceAlreadyUsed(key[0], key[1])
        self._mark(key)

    def invalidate(self, swapper: str, nonces: Iterable[int]) -> None:
        """Mark nonces as used without settling anything (swapper cancellation)."""
        for nonce in nonces:
            key = self._key(swapper, nonce)
            if key not in self._used:
                self._mark(key)

    def checkpoint(self) -> int:
        if self._undo is None:
            self._undo = []
        return len(self._undo)

    def rollback(self, checkpoint: int) -> None:
        if self._undo is None or checkpoint > len(self._undo):
            raise ValueError(f"unknown checkpoint {checkpoint}")
        while len(self._undo) > checkpoint:
            self._used.discard(self._undo.pop())
        if checkpoint == 0:
            self._undo = None

    def commit(self, checkpoint: int) -> None:
        """Keep everything consumed since `checkpoint`."""
        if self._undo is None or checkpoint > len(self._undo):
            raise ValueError(f"unknown checkpoint {checkpoint}")
        if checkpoint == 0:
            self._undo = None

    def __len__(self) -> int:
        return len(self._used)
