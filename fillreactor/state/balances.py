"""
Multi-token balance tracking for the in-memory token ledger.

Implements BalanceTable[Address, Token] -> Amount
"""

from typing import Dict, List, Optional, Tuple


# Type aliases
Address = str  # 20-byte hex string (0x...)
Token = str  # 20-byte hex string (0x...)
Amount = int  # Non-negative integer (arbitrary precision)


class BalanceTable:
    """
    Balance table mapping (owner, token) -> amount.

    Note: this class stores balances in a plain dict. Callers that hash or
    serialize balances should sort keys explicitly.

    While a checkpoint is open, `set` records the previous amount of each
    written key so `rollback` undoes only the writes made since.
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Tuple[Address, Token], Amount] = {}
        self._undo: Optional[List[Tuple[Tuple[Address, Token], Amount]]] = None

    def get(self, owner: Address, token: Token) -> Amount:
        """Get balance for (owner, token). Returns 0 if not found."""
        return self._balances.get((owner, token), 0)

    def set(self, owner: Address, token: Token, amount: Amount) -> None:
        """
        Set balance for (owner, token).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if self._undo is not None:
            self._undo.append(((owner, token), self.get(owner, token)))
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((owner, token), None)
        else:
            self._balances[(owner, token)] = amount

    def add(self, owner: Address, token: Token, delta: Amount) -> None:
        """
        Add delta to balance. Equivalent to set(owner, token, get(...) + delta).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(owner, token)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(owner, token, new_balance)

    def subtract(self, owner: Address, token: Token, delta: Amount) -> None:
        """
        Subtract delta from balance. Equivalent to add(owner, token, -delta).

        Raises:
            ValueError: If delta is negative or insufficient balance
        """
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(owner, token, -delta)

    def get_all_balances(self) -> Dict[Tuple[Address, Token], Amount]:
        return dict(self._balances)

    def checkpoint(self) -> int:
        if self._undo is None:
            self._undo = []
        return len(self._undo)

    def rollback(self, checkpoint: int) -> None:
        if self._undo is None or checkpoint > len(self._undo):
            raise ValueError(f"unknown checkpoint {checkpoint}")
        while len(self._undo) > checkpoint:
            key, previous = self._undo.pop()
            if previous == 0:
                self._balances.pop(key, None)
            else:
                self._balances[key] = previous
        if checkpoint == 0:
            self._undo = None

    def commit(self, checkpoint: int) -> None:
        if self._undo is None or checkpoint > len(self._undo):
            raise ValueError(f"unknown checkpoint {checkpoint}")
        if checkpoint == 0:
            self._undo = None

    def total_supply(self, token: Token) -> Amount:
        return sum(amount for (_, t), amount in self._balances.items() if t == token)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
