"""Swap pricing: fee split and output amount.

Pure functions over integers; nothing here touches pool state.

Fees are taken from the input in basis points, each rounded down:
    creator_fee  = amount_in * creator_fee_bps  // 10000
    platform_fee = amount_in * platform_fee_bps // 10000
    effective_in = amount_in - creator_fee - platform_fee

Output uses the fee-reduced input against reserves scaled by 10000:
    amount_out = effective_in * reserve_out // (reserve_in * 10000 + effective_in)

The 10000 scaling of reserve_in is part of the pool's pricing curve and is
not the x * y = k formula in raw units. Quotes depend on it exactly.
"""

from __future__ import annotations

from dataclasses import dataclass

from pairpool.constants import BPS_DENOMINATOR
from pairpool.errors import EffectiveAmountTooLow, InvalidArgument
from pairpool.safe_int import S


@dataclass(frozen=True)
class FeeSplit:
    """How a swap input divides into fees and the amount that is priced."""

    creator_fee: int
    platform_fee: int
    effective_in: int


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against given reserves."""

    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    creator_fee: int
    platform_fee: int
    effective_in: int
    reserve_in: int
    reserve_out: int

    @property
    def new_reserve_in(self) -> int:
        """Input-side reserve after execution (credited with effective_in only)."""
        return (S(self.reserve_in) + S(self.effective_in)).value

    @property
    def new_reserve_out(self) -> int:
        """Output-side reserve after execution."""
        return (S(self.reserve_out) - S(self.amount_out)).value


def compute_fees(amount_in: int, creator_fee_bps: int, platform_fee_bps: int) -> FeeSplit:
    """Split amount_in into creator fee, platform fee and effective input.

    Raises:
        EffectiveAmountTooLow: If the fees leave nothing to price, including
            when the two fees together exceed the input
    """
    amount = S(amount_in)
    creator_fee = amount.mul_div(creator_fee_bps, BPS_DENOMINATOR)
    platform_fee = amount.mul_div(platform_fee_bps, BPS_DENOMINATOR)

    effective_in = amount.checked_sub(creator_fee + platform_fee)
    if effective_in is None or effective_in <= 0:
        raise EffectiveAmountTooLow(
            f"Fees {creator_fee.value}+{platform_fee.value} leave nothing of {amount_in}"
        )

    return FeeSplit(
        creator_fee=creator_fee.value,
        platform_fee=platform_fee.value,
        effective_in=effective_in.value,
    )


def get_amount_out(effective_in: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate output for an already fee-reduced input.

    Formula: amount_out = (in * res_out) / (res_in * 10000 + in)

    Args:
        effective_in: Input after creator and platform fees
        reserve_in: Reserve of input token in pair
        reserve_out: Reserve of output token in pair

    Returns:
        Output token amount (rounded down); 0 for non-positive inputs
    """
    if effective_in <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0:
        return 0

    numerator = S(effective_in) * S(reserve_out)
    denominator = S(reserve_in) * S(BPS_DENOMINATOR) + S(effective_in)

    return (numerator // denominator).value


def quote_swap(
    token_in: str,
    token_out: str,
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    creator_fee_bps: int,
    platform_fee_bps: int,
) -> SwapQuote:
    """Price a swap of amount_in against (reserve_in, reserve_out).

    Does not check slippage or compare the output against the reserve;
    the caller decides what to do with the quote.

    Raises:
        InvalidArgument: If amount_in is not positive
        EffectiveAmountTooLow: If fees consume the whole input
    """
    if amount_in <= 0:
        raise InvalidArgument(f"amount_in must be positive, got {amount_in}")

    fees = compute_fees(amount_in, creator_fee_bps, platform_fee_bps)
    amount_out = get_amount_out(fees.effective_in, reserve_in, reserve_out)

    return SwapQuote(
        token_in=token_in,
        token_out=token_out,
        amount_in=amount_in,
        amount_out=amount_out,
        creator_fee=fees.creator_fee,
        platform_fee=fees.platform_fee,
        effective_in=fees.effective_in,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
    )
