"""Pool configuration."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from pairpool.constants import MAX_FEE_BPS
from pairpool.models.types import NonNullAddress

# Environment variable names read by PoolConfig.from_env()
ENV_CREATOR = "PAIRPOOL_CREATOR"
ENV_PLATFORM_WALLET = "PAIRPOOL_PLATFORM_WALLET"
ENV_PLATFORM_FEE_BPS = "PAIRPOOL_PLATFORM_FEE_BPS"
ENV_REQUIRE_EMPTY_ON_REMOVE = "PAIRPOOL_REQUIRE_EMPTY_ON_REMOVE"


class PoolConfig(BaseModel):
    """Process-wide settings fixed at pool construction.

    Attributes:
        creator: The single principal allowed to manage pairs and liquidity
        platform_wallet: Receives the platform fee on every swap
        platform_fee_bps: Platform fee in basis points (0-10000)
        require_empty_on_remove: If True, remove_pair refuses pairs that still
            hold reserves instead of stranding them
    """

    model_config = ConfigDict(frozen=True)

    creator: NonNullAddress
    platform_wallet: NonNullAddress
    platform_fee_bps: int = Field(default=0, ge=0, le=MAX_FEE_BPS)
    require_empty_on_remove: bool = False

    @classmethod
    def from_env(cls) -> PoolConfig:
        """Build a config from PAIRPOOL_* environment variables.

        Raises:
            pydantic.ValidationError: If a variable is missing or invalid
        """
        return cls.model_validate(
            {
                "creator": os.environ.get(ENV_CREATOR),
                "platform_wallet": os.environ.get(ENV_PLATFORM_WALLET),
                "platform_fee_bps": os.environ.get(ENV_PLATFORM_FEE_BPS, "0"),
                "require_empty_on_remove": os.environ.get(ENV_REQUIRE_EMPTY_ON_REMOVE, "false"),
            }
        )
