"""Data model: identifiers, pair keys and pair records."""

from pairpool.models.pair import Pair
from pairpool.models.types import (
    NonNullAddress,
    PairKey,
    canonicalize,
    is_null_address,
    is_valid_address,
    normalize_address,
    sort_tokens,
)

__all__ = [
    "NonNullAddress",
    "Pair",
    "PairKey",
    "canonicalize",
    "is_null_address",
    "is_valid_address",
    "normalize_address",
    "sort_tokens",
]
