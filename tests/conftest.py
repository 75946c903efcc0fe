"""Pytest configuration and fixtures."""

import pytest

from pairpool import InMemoryTokenLedger, LiquidityPool, PoolConfig
from tests.helpers import (
    CREATOR,
    CREATOR_FEE_BPS,
    PLATFORM,
    PLATFORM_FEE_BPS,
    POOL,
    SEED_RESERVE,
    TOKEN_X,
    TOKEN_Y,
    make_ledger,
)


@pytest.fixture
def config() -> PoolConfig:
    """Default config: 10 bps platform fee, stranding allowed on removal."""
    return PoolConfig(creator=CREATOR, platform_wallet=PLATFORM, platform_fee_bps=PLATFORM_FEE_BPS)


@pytest.fixture
def ledger() -> InMemoryTokenLedger:
    """Ledger where creator and trader own and have approved every test token."""
    return make_ledger()


@pytest.fixture
def pool(config: PoolConfig, ledger: InMemoryTokenLedger) -> LiquidityPool:
    """Pool with no pairs."""
    return LiquidityPool(config, ledger, address=POOL)


@pytest.fixture
def funded_pool(pool: LiquidityPool) -> LiquidityPool:
    """Pool with an X/Y pair (30 bps) seeded with 1_000_000 on each side."""
    pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, CREATOR_FEE_BPS)
    pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, SEED_RESERVE, SEED_RESERVE)
    return pool


@pytest.fixture
def events(pool: LiquidityPool) -> list:
    """Notifications emitted by the pool fixture, in order."""
    received: list = []
    pool.subscribe(received.append)
    return received
