"""
Price level models and the curve that prices amounts against them.

The quote service lives in `rfq_liquidity.pricing.quotes`.
"""

from .levels import compute_max_liquidity, prices_for_amounts, quote_for_amount, to_base_units
from .models import (
    LevelsEntry,
    MarketMakerLevels,
    PoolLiquidity,
    PoolPrices,
    PriceLevel,
    SwapSide,
    Token,
    TokenPair,
    normalize_token,
)

__all__ = [
    "SwapSide",
    "Token",
    "TokenPair",
    "PriceLevel",
    "LevelsEntry",
    "MarketMakerLevels",
    "PoolPrices",
    "PoolLiquidity",
    "normalize_token",
    "quote_for_amount",
    "prices_for_amounts",
    "to_base_units",
    "compute_max_liquidity",
]
