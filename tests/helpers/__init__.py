"""Test helpers module for shared test utilities.

- constants: Principal and token addresses, common amounts
- factories: Pool and ledger factory functions
"""

from tests.helpers.constants import (
    CREATOR,
    CREATOR_FEE_BPS,
    NULL,
    OUTSIDER,
    PLATFORM,
    PLATFORM_FEE_BPS,
    POOL,
    SEED_RESERVE,
    STARTING_BALANCE,
    TOKEN_X,
    TOKEN_Y,
    TOKEN_Z,
    TRADER,
)
from tests.helpers.factories import make_funded_pool, make_ledger, make_pool

__all__ = [
    # Principals
    "CREATOR",
    "PLATFORM",
    "TRADER",
    "POOL",
    "OUTSIDER",
    "NULL",
    # Tokens
    "TOKEN_X",
    "TOKEN_Y",
    "TOKEN_Z",
    # Amounts
    "STARTING_BALANCE",
    "SEED_RESERVE",
    "CREATOR_FEE_BPS",
    "PLATFORM_FEE_BPS",
    # Factories
    "make_ledger",
    "make_pool",
    "make_funded_pool",
]
