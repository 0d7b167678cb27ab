"""
Market maker filtering and the restriction/blacklist cache.

Two independent exclusion lists live in the shared cache:

- Restricted makers: a hash of maker id -> creation time in epoch
  milliseconds. An entry is in force for the restriction window and pruned
  lazily the next time the hash is read.
- Blacklisted users: one key per trade origin, expired by the cache's own
  TTL.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, Iterable, List, Optional, Set

from ..core.storage.base import CacheInterface
from ..fetchers.base import RfqApi
from ..utils.async_helpers import fire_and_forget

logger = logging.getLogger(__name__)

BLACKLISTED_VALUE = "blacklisted"
LEVELS_CACHE_KEY = "levels"


def now_ms() -> int:
    return int(time.time() * 1000)


class MarketMakerFilter:
    """Decide which makers may be priced and record makers and users to skip."""

    def __init__(
        self,
        exchange_name: str,
        network: int,
        cache: CacheInterface,
        api: RfqApi,
        cache_prefix: str = "cache",
        disabled_makers: Optional[Iterable[str]] = None,
        restrict_ttl_seconds: int = 60 * 60,
        blacklist_ttl_seconds: int = 60 * 60 * 24 * 180,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Args:
            exchange_name: Exchange key used in cache namespaces and log prefixes
            network: Network id
            cache: Shared cache backend
            api: Maker directory
            cache_prefix: Global prefix of the restriction hash key
            disabled_makers: Makers excluded by static configuration
            restrict_ttl_seconds: How long a restriction stays in force
            blacklist_ttl_seconds: Default lifetime of a user blacklist entry
            clock: Current time in epoch milliseconds
        """
        self.exchange_name = exchange_name
        self.network = network
        self.cache = cache
        self.api = api
        self.disabled_makers: Set[str] = set(disabled_makers or [])
        self.restrict_ttl_seconds = restrict_ttl_seconds
        self.blacklist_ttl_seconds = blacklist_ttl_seconds
        self._clock = clock
        self.restrict_hash_key = (
            f"{cache_prefix}_{exchange_name}_{network}_restricted_mms".lower()
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def log_prefix(self) -> str:
        return f"{self.exchange_name}-{self.network}"

    async def eligible_makers(self) -> List[str]:
        """Directory makers minus statically disabled and currently restricted ones."""
        makers, cached_restrictions = await asyncio.gather(
            self.api.get_market_makers(self.network),
            self.cache.hgetall(self.restrict_hash_key),
        )

        restricted = self.parse_restrictions(cached_restrictions)

        return [
            maker
            for maker in makers
            if maker not in self.disabled_makers and maker not in restricted
        ]

    def parse_restrictions(self, cached_values: Dict[str, str]) -> Set[str]:
        """
        Split raw restriction entries into active and expired.

        Expired entries are removed from the cache in the background; a
        failed removal is only logged.

        Returns:
            Makers whose restriction is still in force
        """
        restricted: Set[str] = set()
        to_delete: List[str] = []
        expiration_threshold = self._clock() - self.restrict_ttl_seconds * 1000

        for maker, created_at in cached_values.items():
            try:
                created_at_ms = int(created_at)
            except (TypeError, ValueError):
                self.logger.warning(
                    f"{self.log_prefix}: unreadable restriction timestamp for {maker}: {created_at!r}"
                )
                to_delete.append(maker)
                continue

            if created_at_ms < expiration_threshold:
                to_delete.append(maker)
            else:
                restricted.add(maker)

        if restricted:
            self.logger.debug(
                f"{self.log_prefix}: pricing is skipped for "
                f"{', '.join(sorted(restricted))} due to restriction"
            )

        if to_delete:
            self.logger.debug(
                f"{self.log_prefix}: Deleting expired keys: {','.join(to_delete)}"
            )
            fire_and_forget(
                self.cache.hdel(self.restrict_hash_key, to_delete),
                self.logger,
                f"{self.log_prefix}: Failed to delete expired keys: ",
            )

        return restricted

    async def restrict(self, maker: str) -> None:
        """Exclude `maker` from pricing for the restriction window."""
        self.logger.warning(
            f"{self.log_prefix}: {maker} was restricted for "
            f"{self.restrict_ttl_seconds} sec. due to fails"
        )

        # Creation time lets readers tell whether the entry already expired
        await self.cache.hset(self.restrict_hash_key, maker, str(self._clock()))

        # The cached levels still contain the restricted maker
        fire_and_forget(
            self.cache.delete(self.exchange_name, self.network, LEVELS_CACHE_KEY),
            self.logger,
            f"{self.log_prefix}: Failed to delete levels cache: ",
        )

    @staticmethod
    def blacklist_key(address: str) -> str:
        return f"blacklist_{address}".lower()

    async def is_blacklisted(self, address: str) -> bool:
        result = await self.cache.get(
            self.exchange_name, self.network, self.blacklist_key(address)
        )
        return result == BLACKLISTED_VALUE

    async def blacklist(self, address: str, ttl: Optional[int] = None) -> bool:
        """Refuse to serve `address` for `ttl` seconds (default: configured TTL)."""
        await self.cache.setex(
            self.exchange_name,
            self.network,
            self.blacklist_key(address),
            ttl if ttl is not None else self.blacklist_ttl_seconds,
            BLACKLISTED_VALUE,
        )
        return True
