"""
Configuration management for rfqLiquidity.

Example:
    from rfq_liquidity.config import get_config

    config = get_config()

    redis_kwargs = config.cache.get_redis_connection_kwargs()
    router = config.rfq.router_address
    timeout = config.rfq.async_call_timeout
"""

from .base import BaseConfig, ConfigError
from .cache import CacheConfig
from .chains import ETHER_ADDRESS, ZERO_ADDRESS, ChainConfig
from .manager import ConfigManager, get_config, reload_config
from .rfq import AUGUSTUS_SWAPPER_ADDRESS, RfqConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "CacheConfig",
    "ChainConfig",
    "RfqConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
    "ETHER_ADDRESS",
    "ZERO_ADDRESS",
    "AUGUSTUS_SWAPPER_ADDRESS",
]
