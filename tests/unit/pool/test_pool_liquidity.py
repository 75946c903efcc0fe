"""Tests for deposit_liquidity / withdraw_from_pair."""

import pytest

from pairpool import (
    InMemoryTokenLedger,
    InsufficientReserve,
    InvalidArgument,
    NotAuthorized,
    PairNotFound,
    TransferFailed,
)
from pairpool.safe_int import UINT256_MAX, Uint256Overflow
from tests.helpers import (
    CREATOR,
    OUTSIDER,
    POOL,
    SEED_RESERVE,
    STARTING_BALANCE,
    TOKEN_X,
    TOKEN_Y,
    TOKEN_Z,
    make_ledger,
    make_pool,
)


class TestDeposit:
    """Tests for adding reserves."""

    def test_deposit_credits_reserves(self, pool, ledger):
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)

        pair = pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, 100, 250)

        assert (pair.reserve_low, pair.reserve_high) == (100, 250)
        assert ledger.balance_of(TOKEN_X, POOL) == 100
        assert ledger.balance_of(TOKEN_Y, POOL) == 250
        assert ledger.balance_of(TOKEN_X, CREATOR) == STARTING_BALANCE - 100

    def test_amounts_follow_their_tokens(self, pool):
        """Reversed arguments still credit each amount to its own token."""
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)

        pair = pool.deposit_liquidity(CREATOR, TOKEN_Y, TOKEN_X, 250, 100)

        assert pair.reserve_low == 100  # TOKEN_X
        assert pair.reserve_high == 250  # TOKEN_Y

    def test_deposits_accumulate_without_ratio_check(self, pool):
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)
        pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, 100, 100)
        pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, 1, 5_000)
        assert pool.get_reserves(TOKEN_X, TOKEN_Y) == (101, 5_100)

    def test_non_creator_rejected(self, pool):
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)
        with pytest.raises(NotAuthorized):
            pool.deposit_liquidity(OUTSIDER, TOKEN_X, TOKEN_Y, 100, 100)

    @pytest.mark.parametrize("amounts", [(0, 100), (100, 0), (-1, 100), (100, 1.5)])
    def test_non_positive_amounts_rejected(self, pool, amounts):
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)
        with pytest.raises(InvalidArgument):
            pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, *amounts)

    def test_missing_pair_rejected(self, pool):
        with pytest.raises(PairNotFound):
            pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Z, 100, 100)

    def test_second_pull_failure_rolls_back_first(self):
        """If the high-side pull fails, the low-side pull is undone too."""
        ledger = make_ledger(tokens=(TOKEN_X,))
        pool, _ = make_pool(ledger=ledger)
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)

        with pytest.raises(TransferFailed):
            pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, 100, 100)

        assert pool.get_reserves(TOKEN_X, TOKEN_Y) == (0, 0)
        assert ledger.balance_of(TOKEN_X, CREATOR) == STARTING_BALANCE
        assert ledger.balance_of(TOKEN_X, POOL) == 0
        assert ledger.allowance(TOKEN_X, CREATOR, POOL) == STARTING_BALANCE

    def test_insufficient_allowance_rejected(self, pool, ledger):
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)
        ledger.approve(TOKEN_Y, CREATOR, POOL, 10)
        with pytest.raises(TransferFailed):
            pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, 100, 100)
        assert pool.get_reserves(TOKEN_X, TOKEN_Y) == (0, 0)

    def test_reserve_overflow_rejected_before_transfer(self):
        ledger = InMemoryTokenLedger(custody=POOL)
        for token in (TOKEN_X, TOKEN_Y):
            ledger.mint(token, CREATOR, UINT256_MAX)
            ledger.approve(token, CREATOR, POOL, UINT256_MAX)
        pool, _ = make_pool(ledger=ledger)
        pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, 30)
        pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, UINT256_MAX - 1, 1)
        history = len(ledger.history)

        with pytest.raises(Uint256Overflow):
            pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, 2, 1)

        assert pool.get_reserves(TOKEN_X, TOKEN_Y) == (UINT256_MAX - 1, 1)
        assert len(ledger.history) == history


class TestWithdraw:
    """Tests for removing reserves."""

    def test_withdraw_debits_reserves_and_pays_creator(self, funded_pool, ledger):
        creator_before = ledger.balance_of(TOKEN_Y, CREATOR)

        pair = funded_pool.withdraw_from_pair(CREATOR, TOKEN_X, TOKEN_Y, 400, 600)

        assert (pair.reserve_low, pair.reserve_high) == (SEED_RESERVE - 400, SEED_RESERVE - 600)
        assert ledger.balance_of(TOKEN_Y, CREATOR) == creator_before + 600

    def test_amounts_follow_their_tokens(self, funded_pool):
        funded_pool.withdraw_from_pair(CREATOR, TOKEN_Y, TOKEN_X, 600, 400)
        assert funded_pool.get_reserves(TOKEN_X, TOKEN_Y) == (
            SEED_RESERVE - 400,
            SEED_RESERVE - 600,
        )

    def test_withdraw_everything(self, funded_pool):
        funded_pool.withdraw_from_pair(CREATOR, TOKEN_X, TOKEN_Y, SEED_RESERVE, SEED_RESERVE)
        assert funded_pool.get_pair(TOKEN_X, TOKEN_Y).is_empty

    @pytest.mark.parametrize(
        "amounts",
        [(SEED_RESERVE + 1, 1), (1, SEED_RESERVE + 1), (SEED_RESERVE + 1, SEED_RESERVE + 1)],
    )
    def test_exceeding_reserve_rejected(self, funded_pool, ledger, amounts):
        custody = ledger.balance_of(TOKEN_X, POOL)

        with pytest.raises(InsufficientReserve):
            funded_pool.withdraw_from_pair(CREATOR, TOKEN_X, TOKEN_Y, *amounts)

        assert funded_pool.get_reserves(TOKEN_X, TOKEN_Y) == (SEED_RESERVE, SEED_RESERVE)
        assert ledger.balance_of(TOKEN_X, POOL) == custody

    def test_non_creator_rejected(self, funded_pool):
        with pytest.raises(NotAuthorized):
            funded_pool.withdraw_from_pair(OUTSIDER, TOKEN_X, TOKEN_Y, 1, 1)

    def test_zero_amount_rejected(self, funded_pool):
        with pytest.raises(InvalidArgument):
            funded_pool.withdraw_from_pair(CREATOR, TOKEN_X, TOKEN_Y, 0, 1)

    def test_missing_pair_rejected(self, funded_pool):
        with pytest.raises(PairNotFound):
            funded_pool.withdraw_from_pair(CREATOR, TOKEN_X, TOKEN_Z, 1, 1)

    def test_failed_push_restores_reserves(self, funded_pool, ledger):
        """A custody shortfall on the second push undoes the ledger debit and the first push."""
        # Drain custody of TOKEN_Y behind the pool's back
        ledger.transfer(TOKEN_Y, OUTSIDER, ledger.balance_of(TOKEN_Y, POOL))

        with pytest.raises(TransferFailed):
            funded_pool.withdraw_from_pair(CREATOR, TOKEN_X, TOKEN_Y, 10, 10)

        assert funded_pool.get_reserves(TOKEN_X, TOKEN_Y) == (SEED_RESERVE, SEED_RESERVE)
        assert ledger.balance_of(TOKEN_X, POOL) == SEED_RESERVE
