"""The liquidity pool: pair management, liquidity ledger and swap execution.

Every mutating operation runs the same sequence:
1. ReentrancyGuard admits it (Reentrant otherwise)
2. Creator check for creator-only operations (NotAuthorized)
3. Argument validation and pair resolution
4. Pricing or direct ledger arithmetic, computed before anything moves
5. Value transfers and the reserve update, in a fixed order per operation
6. Notification, after the guard is released

Steps 4-5 are all-or-nothing: reserves of the touched pair are restored and,
when the collaborator supports it, its transfers are reverted if anything
raises.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from typing import Any

import structlog

from pairpool.config import PoolConfig
from pairpool.constants import MAX_FEE_BPS
from pairpool.errors import (
    EmptyReserves,
    InsufficientLiquidity,
    InsufficientReserve,
    InvalidArgument,
    PairNotFound,
    PoolError,
    ReservesNotEmpty,
    SlippageExceeded,
    TransferFailed,
)
from pairpool.events import (
    EventBus,
    EventListener,
    LiquidityDeposited,
    LiquidityWithdrawn,
    PairAdded,
    PairRemoved,
    Swapped,
)
from pairpool.guard import GuardState, ReentrancyGuard, require_creator
from pairpool.models.pair import Pair
from pairpool.models.types import (
    PairKey,
    is_null_address,
    is_valid_address,
    normalize_address,
    sort_tokens,
)
from pairpool.pricing import SwapQuote, quote_swap
from pairpool.registry import PairRegistry
from pairpool.safe_int import S, is_uint256
from pairpool.transfer import TokenTransfer, TransactionalTransfer

logger = structlog.get_logger()


class LiquidityPool:
    """Creator-managed two-sided pool over any number of token pairs.

    Args:
        config: Creator, platform wallet and platform fee
        transfers: Collaborator that moves token balances
        address: The pool's own custody address (recipient of pulls,
            source of pushes)
    """

    def __init__(self, config: PoolConfig, transfers: TokenTransfer, address: str) -> None:
        if not isinstance(transfers, TokenTransfer):
            raise TypeError(f"transfers must implement TokenTransfer, got {type(transfers).__name__}")
        if not isinstance(address, str) or not is_valid_address(normalize_address(address)):
            raise ValueError(f"Invalid pool address: {address!r}")
        if is_null_address(address):
            raise ValueError("Pool address must not be the null address")

        self.config = config
        self.address = normalize_address(address)
        self.registry = PairRegistry()
        self._transfers = transfers
        self._guard = ReentrancyGuard()
        self._events = EventBus()

    # --- Guard / notification plumbing ---

    @property
    def guard_state(self) -> GuardState:
        return self._guard.state

    @property
    def is_busy(self) -> bool:
        return self._guard.is_busy

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener for notifications; returns an unsubscribe callable."""
        return self._events.subscribe(listener)

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            with self._guard.enter(name):
                yield
        except PoolError as exc:
            logger.debug(
                "operation_rejected",
                operation=name,
                error=type(exc).__name__,
                detail=str(exc),
            )
            raise

    @contextmanager
    def _atomic(self, pair: Pair) -> Iterator[None]:
        """Restore the pair's reserves and revert transfers if the block raises."""
        saved = (pair.reserve_low, pair.reserve_high)
        with ExitStack() as stack:
            if isinstance(self._transfers, TransactionalTransfer):
                stack.enter_context(self._transfers.transaction())
            try:
                yield
            except BaseException:
                pair.reserve_low, pair.reserve_high = saved
                raise

    def _pull(self, token: str, owner: str, amount: int) -> None:
        try:
            self._transfers.transfer_from(token, owner, self.address, amount)
        except PoolError:
            raise
        except Exception as exc:
            raise TransferFailed(f"Pull of {amount} {token} from {owner} failed: {exc}") from exc

    def _push(self, token: str, recipient: str, amount: int) -> None:
        try:
            self._transfers.transfer(token, recipient, amount)
        except PoolError:
            raise
        except Exception as exc:
            raise TransferFailed(f"Push of {amount} {token} to {recipient} failed: {exc}") from exc

    # --- Validation helpers ---

    @staticmethod
    def _address(value: Any, name: str) -> str:
        if not isinstance(value, str) or not is_valid_address(normalize_address(value)):
            raise InvalidArgument(f"{name} is not a valid address: {value!r}")
        return normalize_address(value)

    @staticmethod
    def _positive_amount(value: Any, name: str) -> int:
        if not is_uint256(value) or value == 0:
            raise InvalidArgument(f"{name} must be a positive uint256, got {value!r}")
        return int(value)

    def _sorted(self, token_a: Any, token_b: Any) -> tuple[str, str, bool]:
        return sort_tokens(self._address(token_a, "token_a"), self._address(token_b, "token_b"))

    def _pair_tokens(self, token_a: Any, token_b: Any) -> tuple[str, str, bool]:
        """Like _sorted, but rejects equal or null tokens with InvalidArgument."""
        low, high, swapped = self._sorted(token_a, token_b)
        if low == high:
            raise InvalidArgument(f"Pair tokens must differ: {low}")
        if is_null_address(low) or is_null_address(high):
            raise InvalidArgument("Pair tokens must not be the null address")
        return low, high, swapped

    # --- Pair registry ---

    def add_pair(self, caller: str, token_a: str, token_b: str, fee_bps: int) -> PairKey:
        """Register a new pair with zero reserves.

        Args:
            caller: Must be the creator
            token_a: One side of the pair (either order)
            token_b: The other side
            fee_bps: Creator fee taken on swaps of this pair (0-10000)

        Returns:
            The canonical key under which the pair is stored

        Raises:
            Reentrant, NotAuthorized, InvalidArgument, PairExists
        """
        with self._operation("add_pair"):
            require_creator(caller, self.config.creator, "add_pair")
            low, high, _ = self._pair_tokens(token_a, token_b)
            if isinstance(fee_bps, bool) or not isinstance(fee_bps, int):
                raise InvalidArgument(f"fee_bps must be an int, got {fee_bps!r}")
            if not 0 <= fee_bps <= MAX_FEE_BPS:
                raise InvalidArgument(f"fee_bps must be in [0, {MAX_FEE_BPS}], got {fee_bps}")

            key = PairKey(low, high)
            self.registry.add(key, fee_bps)

        self._events.emit(PairAdded(low=key.low, high=key.high, fee_bps=fee_bps))
        return key

    def remove_pair(self, caller: str, token_a: str, token_b: str) -> Pair:
        """Unregister a pair.

        Reserves are not refunded. With the default config a pair that still
        holds reserves is removed anyway and the amounts are logged as
        stranded; with require_empty_on_remove it is refused.

        Returns:
            The removed pair, including any reserves it still held

        Raises:
            Reentrant, NotAuthorized, InvalidArgument, PairNotFound,
            ReservesNotEmpty
        """
        with self._operation("remove_pair"):
            require_creator(caller, self.config.creator, "remove_pair")
            low, high, _ = self._pair_tokens(token_a, token_b)
            key = PairKey(low, high)
            pair = self.registry.require(key)

            if not pair.is_empty:
                if self.config.require_empty_on_remove:
                    raise ReservesNotEmpty(
                        key,
                        f"Pair {key.low}/{key.high} still holds reserves "
                        f"({pair.reserve_low}, {pair.reserve_high})",
                    )
                logger.warning(
                    "pair_removed_with_reserves",
                    pair=key.short(),
                    stranded_low=pair.reserve_low,
                    stranded_high=pair.reserve_high,
                )
            removed = self.registry.remove(key)

        self._events.emit(PairRemoved(low=key.low, high=key.high))
        return removed

    # --- Liquidity ledger ---

    def deposit_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        amount_a: int,
        amount_b: int,
    ) -> Pair:
        """Pull both amounts from the creator and credit them to the reserves.

        Each amount stays with its own token regardless of argument order.
        No price-ratio requirement applies.

        Returns:
            Snapshot of the pair after the deposit

        Raises:
            Reentrant, NotAuthorized, InvalidArgument, PairNotFound,
            TransferFailed, Uint256Overflow
        """
        with self._operation("deposit_liquidity"):
            creator = self.config.creator
            require_creator(caller, creator, "deposit_liquidity")
            amount_a = self._positive_amount(amount_a, "amount_a")
            amount_b = self._positive_amount(amount_b, "amount_b")
            low, high, swapped = self._pair_tokens(token_a, token_b)
            amount_low, amount_high = (amount_b, amount_a) if swapped else (amount_a, amount_b)
            pair = self.registry.require(PairKey(low, high))

            new_low = (S(pair.reserve_low) + S(amount_low)).value
            new_high = (S(pair.reserve_high) + S(amount_high)).value

            with self._atomic(pair):
                self._pull(low, creator, amount_low)
                self._pull(high, creator, amount_high)
                pair.reserve_low, pair.reserve_high = new_low, new_high

            result = pair.snapshot()

        self._events.emit(
            LiquidityDeposited(low=low, high=high, amount_low=amount_low, amount_high=amount_high)
        )
        return result

    def withdraw_from_pair(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        amount_a: int,
        amount_b: int,
    ) -> Pair:
        """Debit both reserves, then push the amounts to the creator.

        Returns:
            Snapshot of the pair after the withdrawal

        Raises:
            Reentrant, NotAuthorized, InvalidArgument, PairNotFound,
            InsufficientReserve, TransferFailed
        """
        with self._operation("withdraw_from_pair"):
            creator = self.config.creator
            require_creator(caller, creator, "withdraw_from_pair")
            amount_a = self._positive_amount(amount_a, "amount_a")
            amount_b = self._positive_amount(amount_b, "amount_b")
            low, high, swapped = self._pair_tokens(token_a, token_b)
            amount_low, amount_high = (amount_b, amount_a) if swapped else (amount_a, amount_b)
            key = PairKey(low, high)
            pair = self.registry.require(key)

            new_low = S(pair.reserve_low).checked_sub(amount_low)
            new_high = S(pair.reserve_high).checked_sub(amount_high)
            if new_low is None or new_high is None:
                raise InsufficientReserve(
                    key,
                    f"Withdrawal ({amount_low}, {amount_high}) exceeds reserves "
                    f"({pair.reserve_low}, {pair.reserve_high})",
                )

            with self._atomic(pair):
                # Ledger first so a callback from the token sees the debited reserves
                pair.reserve_low, pair.reserve_high = new_low.value, new_high.value
                self._push(low, creator, amount_low)
                self._push(high, creator, amount_high)

            result = pair.snapshot()

        self._events.emit(
            LiquidityWithdrawn(low=low, high=high, amount_low=amount_low, amount_high=amount_high)
        )
        return result

    # --- Swap ---

    def _resolve_swap_pair(self, token_in: Any, token_out: Any) -> tuple[Pair, str, str]:
        token_in_norm = self._address(token_in, "token_in")
        token_out_norm = self._address(token_out, "token_out")
        low, high, _ = sort_tokens(token_in_norm, token_out_norm)
        key = PairKey(low, high)
        pair = self.registry.get(key)
        if (
            pair is None
            or token_in_norm == token_out_norm
            or not (pair.key.contains(token_in_norm) and pair.key.contains(token_out_norm))
        ):
            raise PairNotFound(key)
        return pair, token_in_norm, token_out_norm

    def _price(self, pair: Pair, token_in: str, token_out: str, amount_in: int) -> SwapQuote:
        reserve_in, reserve_out = pair.get_reserves(token_in)
        if reserve_in == 0 or reserve_out == 0:
            raise EmptyReserves(
                pair.key,
                f"Pair {pair.key.low}/{pair.key.high} is not funded "
                f"({pair.reserve_low}, {pair.reserve_high})",
            )
        return quote_swap(
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            creator_fee_bps=pair.creator_fee_bps,
            platform_fee_bps=self.config.platform_fee_bps,
        )

    def quote(self, token_in: str, token_out: str, amount_in: int) -> SwapQuote:
        """Price a swap against current reserves without executing it.

        Raises:
            InvalidArgument, PairNotFound, EmptyReserves, EffectiveAmountTooLow
        """
        amount_in = self._positive_amount(amount_in, "amount_in")
        pair, token_in_norm, token_out_norm = self._resolve_swap_pair(token_in, token_out)
        return self._price(pair, token_in_norm, token_out_norm, amount_in)

    def swap(
        self,
        caller: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        min_amount_out: int,
    ) -> SwapQuote:
        """Swap amount_in of token_in for token_out at the pair's current price.

        Effects, in order: pull amount_in from the caller, push the platform
        fee to the platform wallet, push amount_out to the caller, then
        credit effective_in to the input reserve and debit amount_out from
        the output reserve. The creator fee stays in custody outside the
        reserves.

        Returns:
            The executed quote (amounts, fees and pre-swap reserves)

        Raises:
            Reentrant, InvalidArgument, PairNotFound, EmptyReserves,
            EffectiveAmountTooLow, SlippageExceeded, InsufficientLiquidity,
            TransferFailed
        """
        with self._operation("swap"):
            caller_norm = self._address(caller, "caller")
            if is_null_address(caller_norm):
                raise InvalidArgument("caller must not be the null address")
            amount_in = self._positive_amount(amount_in, "amount_in")
            if not is_uint256(min_amount_out):
                raise InvalidArgument(f"min_amount_out must be a uint256, got {min_amount_out!r}")

            pair, token_in_norm, token_out_norm = self._resolve_swap_pair(token_in, token_out)
            quote = self._price(pair, token_in_norm, token_out_norm, amount_in)

            if quote.amount_out < min_amount_out:
                raise SlippageExceeded(quote.amount_out, min_amount_out)
            if quote.amount_out > quote.reserve_out:
                raise InsufficientLiquidity(
                    pair.key,
                    f"Output {quote.amount_out} exceeds reserve {quote.reserve_out}",
                )

            new_reserve_in = quote.new_reserve_in
            new_reserve_out = quote.new_reserve_out

            with self._atomic(pair):
                self._pull(token_in_norm, caller_norm, amount_in)
                if quote.platform_fee > 0:
                    self._push(token_in_norm, self.config.platform_wallet, quote.platform_fee)
                if quote.amount_out > 0:
                    self._push(token_out_norm, caller_norm, quote.amount_out)
                pair.set_reserves(token_in_norm, new_reserve_in, new_reserve_out)

            logger.debug(
                "swap_priced",
                pair=pair.key.short(),
                creator_fee=quote.creator_fee,
                platform_fee=quote.platform_fee,
                effective_in=quote.effective_in,
            )

        self._events.emit(
            Swapped(
                caller=caller_norm,
                token_in=token_in_norm,
                token_out=token_out_norm,
                amount_in=amount_in,
                amount_out=quote.amount_out,
            )
        )
        return quote

    # --- Queries ---

    def get_pair(self, token_a: str, token_b: str) -> Pair | None:
        """Snapshot of the pair for two tokens given in either order."""
        low, high, _ = self._sorted(token_a, token_b)
        pair = self.registry.get(PairKey(low, high))
        return pair.snapshot() if pair is not None else None

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves ordered to match the arguments: (reserve of a, reserve of b).

        Raises:
            PairNotFound: If no pair holds both tokens
        """
        low, high, swapped = self._sorted(token_a, token_b)
        key = PairKey(low, high)
        pair = self.registry.get(key)
        if pair is None or low == high:
            raise PairNotFound(key)
        if swapped:
            return pair.reserve_high, pair.reserve_low
        return pair.reserve_low, pair.reserve_high

    def pair_keys(self) -> list[PairKey]:
        """All registered keys; order is unspecified and changes on removal."""
        return self.registry.keys()

    def pairs(self) -> list[Pair]:
        """Snapshots of all registered pairs."""
        return self.registry.pairs()

    def pairs_for_token(self, token: str) -> list[PairKey]:
        """Keys of every pair that trades token."""
        return self.registry.keys_for_token(self._address(token, "token"))
