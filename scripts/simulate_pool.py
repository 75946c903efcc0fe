#!/usr/bin/env python3
"""Simulate a funded pair and a sequence of swaps against it.

Builds a pool on an InMemoryTokenLedger, seeds one pair, then alternates
swaps in both directions and prints reserves, quotes and fee accrual.

Usage:
    python scripts/simulate_pool.py --reserve 1000000 --amount 10000 --swaps 5
    python scripts/simulate_pool.py --creator-fee 30 --platform-fee 10 -v
"""

import argparse
import logging
import sys
from pathlib import Path

import structlog

sys.path.insert(0, str(Path(__file__).parent.parent))

from pairpool import InMemoryTokenLedger, LiquidityPool, PoolConfig, PoolError

logger = structlog.get_logger()

CREATOR = "0x1000000000000000000000000000000000000001"
PLATFORM = "0x2000000000000000000000000000000000000002"
TRADER = "0x3000000000000000000000000000000000000003"
POOL = "0x4000000000000000000000000000000000000004"
TOKEN_X = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
TOKEN_Y = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"


def build_pool(args: argparse.Namespace) -> tuple[LiquidityPool, InMemoryTokenLedger]:
    """Create the pool, fund creator and trader, and seed the pair."""
    ledger = InMemoryTokenLedger(custody=POOL)
    config = PoolConfig(
        creator=CREATOR,
        platform_wallet=PLATFORM,
        platform_fee_bps=args.platform_fee,
    )
    pool = LiquidityPool(config, ledger, address=POOL)

    for token in (TOKEN_X, TOKEN_Y):
        ledger.mint(token, CREATOR, args.reserve)
        ledger.approve(token, CREATOR, POOL, args.reserve)
        ledger.mint(token, TRADER, args.amount * args.swaps)
        ledger.approve(token, TRADER, POOL, args.amount * args.swaps)

    pool.add_pair(CREATOR, TOKEN_X, TOKEN_Y, args.creator_fee)
    pool.deposit_liquidity(CREATOR, TOKEN_X, TOKEN_Y, args.reserve, args.reserve)
    return pool, ledger


def run(args: argparse.Namespace) -> int:
    pool, ledger = build_pool(args)

    print("=" * 60)
    print("Pair simulation")
    print("=" * 60)
    print(f"Reserves:     {pool.get_reserves(TOKEN_X, TOKEN_Y)}")
    print(f"Creator fee:  {args.creator_fee} bps")
    print(f"Platform fee: {args.platform_fee} bps")
    print()

    for i in range(args.swaps):
        token_in, token_out = (TOKEN_X, TOKEN_Y) if i % 2 == 0 else (TOKEN_Y, TOKEN_X)
        try:
            result = pool.swap(TRADER, token_in, token_out, args.amount, 0)
        except PoolError as exc:
            logger.error("swap_failed", step=i, error=type(exc).__name__, detail=str(exc))
            return 1
        print(
            f"swap {i}: {result.amount_in} {token_in[-4:]} -> {result.amount_out} {token_out[-4:]} "
            f"(creator fee {result.creator_fee}, platform fee {result.platform_fee})"
        )
        print(f"        reserves now {pool.get_reserves(TOKEN_X, TOKEN_Y)}")

    print()
    custody_x = ledger.balance_of(TOKEN_X, POOL)
    custody_y = ledger.balance_of(TOKEN_Y, POOL)
    reserve_x, reserve_y = pool.get_reserves(TOKEN_X, TOKEN_Y)
    print(f"Custody:      ({custody_x}, {custody_y})")
    print(f"Accrued fees: ({custody_x - reserve_x}, {custody_y - reserve_y})")
    print(f"Platform:     ({ledger.balance_of(TOKEN_X, PLATFORM)}, {ledger.balance_of(TOKEN_Y, PLATFORM)})")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate swaps against a single pair")
    parser.add_argument("--reserve", type=int, default=1_000_000, help="Initial reserve per side")
    parser.add_argument("--amount", type=int, default=10_000, help="Input amount per swap")
    parser.add_argument("--swaps", type=int, default=4, help="Number of swaps to run")
    parser.add_argument("--creator-fee", type=int, default=30, help="Creator fee in bps")
    parser.add_argument("--platform-fee", type=int, default=10, help="Platform fee in bps")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
