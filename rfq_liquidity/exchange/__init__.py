"""
Aggregator-facing RFQ liquidity source.

Usage:
    from rfq_liquidity.config import get_config
    from rfq_liquidity.core.storage import RedisCache
    from rfq_liquidity.exchange import RfqExchange

    config = get_config()
    cache = RedisCache({**config.cache.get_redis_connection_kwargs(), "prefix": config.cache.CACHE_PREFIX})
    await cache.connect()

    exchange = RfqExchange.from_config(config, cache, api)
    pools = await exchange.get_pool_identifiers(src, dest, SwapSide.SELL)
"""

from .rfq_exchange import RfqExchange

__all__ = ["RfqExchange"]
