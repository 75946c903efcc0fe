"""The Pair record held by the registry."""

from __future__ import annotations

from dataclasses import dataclass, replace

from pairpool.models.types import PairKey, normalize_address


@dataclass
class Pair:
    """A registered pair with its reserves and creator fee.

    Reserves are mutated in place by the pool; callers outside the pool
    receive copies (see snapshot()).
    """

    key: PairKey
    reserve_low: int = 0
    reserve_high: int = 0
    # Creator fee in basis points (30 = 0.3%)
    creator_fee_bps: int = 0

    @property
    def token_low(self) -> str:
        return self.key.low

    @property
    def token_high(self) -> str:
        return self.key.high

    @property
    def is_empty(self) -> bool:
        """True if both reserves are zero."""
        return self.reserve_low == 0 and self.reserve_high == 0

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.key.low:
            return self.reserve_low, self.reserve_high
        elif token_in_norm == self.key.high:
            return self.reserve_high, self.reserve_low
        else:
            raise ValueError(f"Token {token_in} not in pair")

    def set_reserves(self, token_in: str, reserve_in: int, reserve_out: int) -> None:
        """Store reserves given in (token_in side, other side) order."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.key.low:
            self.reserve_low, self.reserve_high = reserve_in, reserve_out
        elif token_in_norm == self.key.high:
            self.reserve_high, self.reserve_low = reserve_in, reserve_out
        else:
            raise ValueError(f"Token {token_in} not in pair")

    def get_token_out(self, token_in: str) -> str:
        """Get the other side of the pair for a given input token."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.key.low:
            return self.key.high
        elif token_in_norm == self.key.high:
            return self.key.low
        else:
            raise ValueError(f"Token {token_in} not in pair")

    def snapshot(self) -> Pair:
        """Return a detached copy."""
        return replace(self)
