"""pairpool - a creator-managed two-sided liquidity pool."""

from pairpool.config import PoolConfig
from pairpool.errors import (
    EffectiveAmountTooLow,
    EmptyReserves,
    InsufficientLiquidity,
    InsufficientReserve,
    InvalidArgument,
    NotAuthorized,
    PairExists,
    PairNotFound,
    PoolError,
    Reentrant,
    ReservesNotEmpty,
    SlippageExceeded,
    TransferFailed,
)
from pairpool.models import Pair, PairKey, canonicalize
from pairpool.pool import LiquidityPool
from pairpool.pricing import SwapQuote, quote_swap
from pairpool.transfer import InMemoryTokenLedger, TokenTransfer

__version__ = "0.1.0"
__all__ = [
    "LiquidityPool",
    "PoolConfig",
    "Pair",
    "PairKey",
    "canonicalize",
    "SwapQuote",
    "quote_swap",
    "TokenTransfer",
    "InMemoryTokenLedger",
    # Errors
    "PoolError",
    "InvalidArgument",
    "NotAuthorized",
    "Reentrant",
    "PairExists",
    "PairNotFound",
    "EmptyReserves",
    "EffectiveAmountTooLow",
    "SlippageExceeded",
    "InsufficientLiquidity",
    "InsufficientReserve",
    "ReservesNotEmpty",
    "TransferFailed",
    "__version__",
]
