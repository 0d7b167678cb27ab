"""
In-process cache for local runs and tests.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union

from .base import StorageBase, CacheInterface

logger = logging.getLogger(__name__)


class InMemoryCache(StorageBase, CacheInterface):
    """
    Dictionary-backed cache with the same semantics as RedisCache.

    TTLs are checked lazily on read against a monotonic clock. Not shared
    between processes.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, clock=time.monotonic):
        super().__init__(config or {})
        self._clock = clock
        self._values: Dict[str, Tuple[str, Optional[float]]] = {}
        self._hashes: Dict[str, Dict[str, str]] = {}

    async def connect(self) -> None:
        self.is_connected = True

    async def disconnect(self) -> None:
        self.is_connected = False

    async def health_check(self) -> bool:
        return True

    def _live_value(self, full_key: str) -> Optional[str]:
        entry = self._values.get(full_key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._values[full_key]
            return None
        return value

    async def get(self, namespace: str, network: int, key: str) -> Optional[str]:
        return self._live_value(self.build_key(namespace, network, key))

    async def setex(
        self, namespace: str, network: int, key: str, ttl: int, value: str
    ) -> bool:
        self._values[self.build_key(namespace, network, key)] = (
            value,
            self._clock() + ttl,
        )
        return True

    async def delete(self, namespace: str, network: int, key: str) -> bool:
        full_key = self.build_key(namespace, network, key)
        existed = self._live_value(full_key) is not None
        self._values.pop(full_key, None)
        return existed

    async def hgetall(self, key: str) -> Dict[str, str]:
        return dict(self._hashes.get(key, {}))

    async def hset(self, key: str, field: str, value: Union[str, int]) -> int:
        fields = self._hashes.setdefault(key, {})
        created = field not in fields
        fields[field] = str(value)
        return int(created)

    async def hdel(self, key: str, fields: List[str]) -> int:
        stored = self._hashes.get(key)
        if not stored:
            return 0
        removed = 0
        for field in fields:
            if stored.pop(field, None) is not None:
                removed += 1
        if not stored:
            del self._hashes[key]
        return removed
