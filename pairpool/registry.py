"""Pair registry.

Stores pairs under their canonical key and keeps an enumeration index
alongside the map:
- _pairs: PairKey -> Pair
- _keys: list of PairKeys (arena-style, enumeration order)
- _positions: PairKey -> index into _keys

Removal swaps the removed key with the last one and pops, so it is O(1)
and the order of the remaining keys can change.

The registry performs no authorization; LiquidityPool does that before
calling in.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from pairpool.errors import PairExists, PairNotFound
from pairpool.models.pair import Pair
from pairpool.models.types import PairKey, normalize_address

logger = structlog.get_logger()


class PairRegistry:
    """Registry of tradeable pairs keyed by canonical PairKey."""

    def __init__(self) -> None:
        self._pairs: dict[PairKey, Pair] = {}
        self._keys: list[PairKey] = []
        self._positions: dict[PairKey, int] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._pairs

    def __iter__(self) -> Iterator[PairKey]:
        return iter(list(self._keys))

    def add(self, key: PairKey, creator_fee_bps: int) -> Pair:
        """Insert an empty pair and append its key to the index.

        Args:
            key: Canonical key (low < high)
            creator_fee_bps: Fee taken by the creator on swaps of this pair

        Raises:
            PairExists: If the key is already registered
        """
        if key in self._pairs:
            raise PairExists(key)

        pair = Pair(key=key, creator_fee_bps=creator_fee_bps)
        self._pairs[key] = pair
        self._positions[key] = len(self._keys)
        self._keys.append(key)

        logger.debug("registry_pair_added", pair=key.short(), index=self._positions[key])
        return pair

    def remove(self, key: PairKey) -> Pair:
        """Delete a pair and swap-and-pop its key out of the index.

        Returns:
            The removed Pair, with whatever reserves it still held

        Raises:
            PairNotFound: If the key is not registered
        """
        pair = self._pairs.pop(key, None)
        if pair is None:
            raise PairNotFound(key)

        index = self._positions.pop(key)
        last = self._keys.pop()
        if last != key:
            # Move the former last key into the vacated slot
            self._keys[index] = last
            self._positions[last] = index

        logger.debug("registry_pair_removed", pair=key.short(), index=index)
        return pair

    def get(self, key: PairKey) -> Pair | None:
        """Look up a pair by canonical key. Callers canonicalize first."""
        return self._pairs.get(key)

    def require(self, key: PairKey) -> Pair:
        """Like get(), but raises PairNotFound when absent."""
        pair = self._pairs.get(key)
        if pair is None:
            raise PairNotFound(key)
        return pair

    def keys(self) -> list[PairKey]:
        """All registered keys, in index order (unstable across removals)."""
        return list(self._keys)

    def pairs(self) -> list[Pair]:
        """Detached copies of all registered pairs, in index order."""
        return [self._pairs[key].snapshot() for key in self._keys]

    def keys_for_token(self, token: str) -> list[PairKey]:
        """Keys of every pair that has token on either side."""
        token_norm = normalize_address(token)
        return [key for key in self._keys if token_norm in key]
