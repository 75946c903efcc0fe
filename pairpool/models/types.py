"""Identifier types and pair canonicalization.

Principals (accounts) and token ids share one representation: a lowercase
0x-prefixed 20-byte hex string. Lowercase fixed-width hex compares the same
as the underlying number, so plain string ordering is the total order used
to canonicalize pairs.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, NamedTuple

from pydantic import AfterValidator, Field

from pairpool.constants import NULL_ADDRESS

# 0x followed by exactly 40 hex digits; no separators or signs
_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: Any) -> bool:
    """Check if a value is a well-formed 20-byte hex address."""
    if not isinstance(address, str):
        return False
    return _ADDRESS_RE.fullmatch(address) is not None


def is_null_address(address: str) -> bool:
    """True for the all-zero address."""
    return normalize_address(address) == NULL_ADDRESS


def _non_null_address(value: str) -> str:
    addr = normalize_address(value)
    if addr == NULL_ADDRESS:
        raise ValueError("Address must not be the null address")
    return addr


# Address that may not be the null principal
NonNullAddress = Annotated[
    str,
    Field(pattern=r"^0x[0-9a-fA-F]{40}$"),
    AfterValidator(_non_null_address),
]


class PairKey(NamedTuple):
    """Canonical identifier of a pair: low < high under address ordering."""

    low: str
    high: str

    def contains(self, token: str) -> bool:
        """True if token is one of the two sides."""
        token_norm = normalize_address(token)
        return token_norm == self.low or token_norm == self.high

    def short(self) -> str:
        """Abbreviated form for log lines."""
        return f"{self.low[-8:]}/{self.high[-8:]}"


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str, bool]:
    """Normalize and order two tokens.

    Performs no validation, so equal or malformed tokens are passed through
    and simply fail to match any registered pair.

    Returns:
        Tuple of (low, high, swapped) where swapped is True if token_a
        ended up on the high side
    """
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    if b < a:
        return b, a, True
    return a, b, False


def canonicalize(token_a: str, token_b: str) -> PairKey:
    """Build the canonical key for a token pair (either argument order)."""
    low, high, _ = sort_tokens(token_a, token_b)
    return PairKey(low, high)
