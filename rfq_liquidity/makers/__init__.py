"""
Market maker eligibility, restrictions and the user blacklist.
"""

from .restrictions import BLACKLISTED_VALUE, LEVELS_CACHE_KEY, MarketMakerFilter

__all__ = ["MarketMakerFilter", "BLACKLISTED_VALUE", "LEVELS_CACHE_KEY"]
