"""
Price level curve.

A market maker publishes its depth of book as tiers of (cumulative base
size, marginal price). Walking the tiers in order gives a piecewise-linear
curve from base amount to quote amount:

    quote(b) = quote(level[i-1]) + (b - level[i-1]) * price[i]   for level[i-1] < b <= level[i]

Nothing is extrapolated past the deepest tier. All arithmetic is done with
Decimal; conversion to integer base units truncates toward zero.
"""

from decimal import Decimal, ROUND_DOWN, localcontext
from typing import List, Optional, Sequence

from .models import PriceLevel, SwapSide, Token

# Enough digits for uint256 amounts scaled by 18 decimals
DECIMAL_PRECISION = 120

ZERO = Decimal(0)
ONE = Decimal(1)


def with_zero_level(levels: Sequence[PriceLevel]) -> List[PriceLevel]:
    """
    Return the tiers starting at the origin.

    When the first tier has a non-zero size, a zero-size tier with the same
    price is prepended. The input is not modified.
    """
    result = list(levels)
    if result and result[0].level > 0:
        result.insert(0, PriceLevel(level=ZERO, price=result[0].price))
    return result


def quote_for_amount(
    levels: Sequence[PriceLevel],
    req_base_amount: Optional[Decimal] = None,
    req_quote_amount: Optional[Decimal] = None,
) -> Optional[Decimal]:
    """
    Evaluate the curve for a base amount, or invert it for a quote amount.

    Args:
        levels: Tiers ordered by strictly increasing `level`
        req_base_amount: Base amount to sell, returns the quote amount
        req_quote_amount: Quote amount wanted, returns the base amount

    Returns:
        The other side's amount in whole tokens, or None when the request
        cannot be filled (empty book, both or neither amount given, amount
        below the first tier or beyond the deepest one)
    """
    if req_base_amount is not None and req_quote_amount is not None:
        return None
    if not levels:
        return None

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION

        base_amount = levels[0].level
        quote_amount = levels[0].level * levels[0].price

        if (req_base_amount is not None and req_base_amount < base_amount) or (
            req_quote_amount is not None and req_quote_amount < quote_amount
        ):
            return None

        for previous, tier in zip(levels, levels[1:]):
            tier_depth = tier.level - previous.level
            tier_end_quote = quote_amount + tier_depth * tier.price

            if req_base_amount is not None and req_base_amount <= tier.level:
                return quote_amount + (req_base_amount - base_amount) * tier.price
            if req_quote_amount is not None and req_quote_amount <= tier_end_quote:
                return base_amount + (req_quote_amount - quote_amount) / tier.price

            base_amount = tier.level
            quote_amount = tier_end_quote

    return None


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Scale whole tokens to integer base units, truncating toward zero."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        scaled = amount.scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def prices_for_amounts(
    amounts: Sequence[Decimal],
    levels: Sequence[PriceLevel],
    src_token: Token,
    dest_token: Token,
    side: SwapSide,
) -> List[int]:
    """
    Price a ladder of amounts against one maker's tiers.

    `amounts` are whole-token amounts and must be non-decreasing: once one
    amount cannot be filled, it and every later amount are reported as 0
    without being evaluated.

    SELL treats each amount as base (source) and returns destination base
    units; BUY treats it as quote (destination) and returns source base
    units.
    """
    curve = with_zero_level(levels)

    outputs = [ZERO] * len(amounts)
    for i, amount in enumerate(amounts):
        if amount == 0:
            continue

        if side == SwapSide.SELL:
            output = quote_for_amount(curve, req_base_amount=amount)
        else:
            output = quote_for_amount(curve, req_quote_amount=amount)

        if output is None:
            break
        outputs[i] = output

    decimals = dest_token.decimals if side == SwapSide.SELL else src_token.decimals
    return [to_base_units(output, decimals) for output in outputs]


def compute_max_liquidity(levels: Sequence[PriceLevel], base_token_price_usd: float) -> float:
    """USD value of the deepest tier's cumulative size."""
    if not levels:
        return 0.0
    return float(levels[-1].level * Decimal(str(base_token_price_usd)))
