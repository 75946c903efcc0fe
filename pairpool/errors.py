"""Pool error classes.

Every failed operation raises exactly one of these; the pool state is left
as it was before the call.
"""

from __future__ import annotations

from pairpool.models.types import PairKey


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class InvalidArgument(PoolError):
    """Null, zero, malformed or equal-token input."""

    pass


class NotAuthorized(PoolError):
    """Caller is not the creator on a creator-only operation."""

    pass


class Reentrant(PoolError):
    """Operation entered while another operation is in flight."""

    pass


class PairError(PoolError):
    """Error concerning a specific pair."""

    def __init__(self, key: PairKey, message: str) -> None:
        super().__init__(message)
        self.key = key


class PairExists(PairError):
    """A pair already occupies the canonical key."""

    def __init__(self, key: PairKey) -> None:
        super().__init__(key, f"Pair already exists: {key.low}/{key.high}")


class PairNotFound(PairError):
    """No registered pair matches the requested tokens."""

    def __init__(self, key: PairKey) -> None:
        super().__init__(key, f"Pair not found: {key.low}/{key.high}")


class EmptyReserves(PairError):
    """Swap against a pair with a zero reserve on either side."""

    pass


class EffectiveAmountTooLow(PoolError):
    """Fees consume the whole swap input."""

    pass


class SlippageExceeded(PoolError):
    """Output is below the caller's minimum."""

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        super().__init__(f"Output {amount_out} below minimum {min_amount_out}")
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out


class InsufficientLiquidity(PairError):
    """Output would exceed the output reserve."""

    pass


class InsufficientReserve(PairError):
    """Withdrawal exceeds current holdings."""

    pass


class ReservesNotEmpty(PairError):
    """Removal refused because the pair still holds reserves."""

    pass


class TransferFailed(PoolError):
    """The value-transfer collaborator refused a move."""

    pass
