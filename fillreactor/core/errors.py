"""Exception types for order resolution and settlement.

Every failure raised out of `resolve()`, `SettlementEngine.execute*()` or
`SettlementEngine.quote()` is a `ReactorError`. The four category bases tell
the caller what to do with the order:

- ``MalformedOrderError``: the order itself is broken. Never retry.
- ``AuthorizationError``: signatures, nonces or routing are wrong. Discard.
- ``LiquidityError``: the attempt was under-funded. Retry with new funding.
- ``TimingError``: not fillable right now. Retry after waiting.
"""

from __future__ import annotations


class ReactorError(Exception):
    """Base class for all reactor failures."""

    retryable: bool = False


class MalformedOrderError(ReactorError):
    """The order (or batch) violates a structural invariant."""


class AuthorizationError(ReactorError):
    """A signature, nonce, or routing check failed."""


class LiquidityError(ReactorError):
    """A pull or push could not be funded."""

    retryable = True


class TimingError(ReactorError):
    """The order is not fillable in the current execution context."""

    retryable = True


# -- malformed ---------------------------------------------------------------


class OrderDecodeError(MalformedOrderError):
    """Raw order bytes could not be decoded into a known order family."""


class BatchTooLarge(MalformedOrderError):
    pass


class EndTimeBeforeStartTime(MalformedOrderError):
    pass


class DeadlineBeforeEndTime(MalformedOrderError):
    pass


class InputAndOutputDecay(MalformedOrderError):
    pass


class IncorrectAmounts(MalformedOrderError):
    pass


class InvalidDecayCurve(MalformedOrderError):
    """Piecewise curve arrays differ in length or offsets go backwards."""


class InputOutputScaling(MalformedOrderError):
    pass


class FeeTooLarge(MalformedOrderError):
    pass


# -- authorization -----------------------------------------------------------


class InvalidCosignature(AuthorizationError):
    pass


class InvalidCosignerInput(AuthorizationError):
    pass


class InvalidCosignerOutput(AuthorizationError):
    pass


class InvalidSignature(AuthorizationError):
    pass


class PermitAmountExceeded(AuthorizationError):
    """A pull asked for more than the permit's signed ceiling."""


class NonceAlreadyUsed(AuthorizationError):
    def __init__(self, swapper: str, nonce: int) -> None:
        self.swapper = swapper
        self.nonce = nonce
        super().__init__(f"nonce already used: swapper={swapper} nonce={nonce}")


class InvalidReactor(AuthorizationError):
    pass


class InvalidValidationContract(AuthorizationError):
    pass


class ValidationFailed(AuthorizationError):
    pass


class ReentrantCall(AuthorizationError):
    pass


# -- liquidity ---------------------------------------------------------------


class InsufficientBalance(LiquidityError):
    def __init__(self, owner: str, token: str, balance: int, amount: int) -> None:
        self.owner = owner
        self.token = token
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"insufficient balance: owner={owner} token={token} balance={balance} amount={amount}"
        )


# -- timing ------------------------------------------------------------------


class DeadlinePassed(TimingError):
    pass


class OrderNotFillable(TimingError):
    pass


class NoExclusiveOverride(TimingError):
    pass


class InvalidGasPrice(TimingError):
    pass
