"""
Redis implementation of the shared RFQ cache.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import redis.asyncio as redis
from redis.asyncio import Redis

from .base import (
    StorageBase,
    CacheInterface,
    ConnectionError,
    DataError
)

logger = logging.getLogger(__name__)


class RedisCache(StorageBase, CacheInterface):
    """
    Redis-backed cache shared by every pricing and trade-building worker.

    Holds the price level snapshot, the market maker restriction hash and
    the user blacklist. Plain keys carry the configured prefix, so one
    Redis database can serve several deployments.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Args:
            config: Configuration with keys:
                - host: Redis host
                - port: Redis port
                - password: Redis password (optional)
                - db: Redis database number (default: 0)
                - socket_timeout: Socket timeout in seconds (default: 5)
                - prefix: Key prefix (default: "cache")
                - connection_pool_kwargs: Additional connection pool arguments
        """
        super().__init__(config)
        self.prefix = config.get('prefix', 'cache')
        self.client: Optional[Redis] = None

    async def connect(self) -> None:
        """Establish connection to Redis."""
        try:
            pool_kwargs = {
                'host': self.config.get('host', 'localhost'),
                'port': self.config.get('port', 6379),
                'db': self.config.get('db', 0),
                'decode_responses': True,
                'socket_timeout': self.config.get('socket_timeout', 5),
                **self.config.get('connection_pool_kwargs', {})
            }

            # Only add password if it's actually set
            password = self.config.get('password')
            if password is not None:
                pool_kwargs['password'] = password

            pool = redis.ConnectionPool(**pool_kwargs)
            self.client = redis.Redis(connection_pool=pool)

            await self.client.ping()

            self.is_connected = True
            logger.info("Redis connection established")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise ConnectionError(f"Redis connection failed: {e}")

    async def disconnect(self) -> None:
        if self.client:
            await self.client.aclose()

        self.is_connected = False
        logger.info("Redis connection closed")

    async def health_check(self) -> bool:
        if not self.client:
            return False

        try:
            response = await self.client.ping()
            return response is True
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    def _require_client(self) -> Redis:
        if not self.client:
            raise ConnectionError("Not connected to Redis")
        return self.client

    def _full_key(self, namespace: str, network: int, key: str) -> str:
        return f"{self.prefix}:{self.build_key(namespace, network, key)}"

    # Cache Interface Implementation

    async def get(self, namespace: str, network: int, key: str) -> Optional[str]:
        client = self._require_client()
        full_key = self._full_key(namespace, network, key)
        try:
            return await client.get(full_key)
        except Exception as e:
            logger.error(f"Failed to get cache key {full_key}: {e}")
            raise DataError(f"Cache get failed: {e}")

    async def setex(
        self, namespace: str, network: int, key: str, ttl: int, value: str
    ) -> bool:
        client = self._require_client()
        full_key = self._full_key(namespace, network, key)
        try:
            result = await client.setex(full_key, ttl, value)
            return result is True
        except Exception as e:
            logger.error(f"Failed to set cache key {full_key}: {e}")
            raise DataError(f"Cache set failed: {e}")

    async def delete(self, namespace: str, network: int, key: str) -> bool:
        client = self._require_client()
        full_key = self._full_key(namespace, network, key)
        try:
            result = await client.delete(full_key)
            return result > 0
        except Exception as e:
            logger.error(f"Failed to delete cache key {full_key}: {e}")
            raise DataError(f"Cache delete failed: {e}")

    # Hash operations, keys used as given

    async def hgetall(self, key: str) -> Dict[str, str]:
        client = self._require_client()
        try:
            return await client.hgetall(key) or {}
        except Exception as e:
            logger.error(f"Failed to read hash {key}: {e}")
            raise DataError(f"Cache hgetall failed: {e}")

    async def hset(self, key: str, field: str, value: Union[str, int]) -> int:
        client = self._require_client()
        try:
            return await client.hset(key, field, str(value))
        except Exception as e:
            logger.error(f"Failed to set field {field} of hash {key}: {e}")
            raise DataError(f"Cache hset failed: {e}")

    async def hdel(self, key: str, fields: List[str]) -> int:
        if not fields:
            return 0
        client = self._require_client()
        try:
            return await client.hdel(key, *fields)
        except Exception as e:
            logger.error(f"Failed to delete fields {fields} of hash {key}: {e}")
            raise DataError(f"Cache hdel failed: {e}")
