"""
Storage layer for the RFQ core.

The RFQ core keeps three things in a shared key-value cache:
- the price level snapshot of all eligible market makers (short TTL)
- the hash of temporarily restricted market makers
- blacklisted trade origins (long TTL)

Usage:
    from rfq_liquidity.core.storage import RedisCache

    async with RedisCache({"host": "localhost", "prefix": "cache"}) as cache:
        await cache.setex("hashflow", 1, "levels", 5, payload)
"""

from .base import CacheInterface, ConnectionError, DataError, StorageBase, StorageError
from .memory import InMemoryCache
from .redis import RedisCache

__all__ = [
    "StorageBase",
    "StorageError",
    "ConnectionError",
    "DataError",
    "CacheInterface",
    "InMemoryCache",
    "RedisCache",
]
