"""
Quote computation across market makers.

Every maker that quotes an ordered token pair is exposed to the aggregator
as its own synthetic pool, `<exchange>_<src>_<dest>_<maker>`. Prices for a
pool come from walking that maker's price levels.
"""

import json
import logging
from decimal import Decimal, localcontext
from typing import List, Optional, Sequence

from ..core.storage.base import CacheInterface
from ..fetchers.base import RfqApi, TokenPriceProvider
from ..fetchers.tokens import TokenMetadataProvider
from ..makers.restrictions import LEVELS_CACHE_KEY, MarketMakerFilter
from ..utils.async_helpers import with_timeout
from ..validation.validators import valid_levels_entries
from .levels import DECIMAL_PRECISION, ONE, compute_max_liquidity, prices_for_amounts
from .models import (
    MarketMakerLevels,
    PoolLiquidity,
    PoolPrices,
    SwapSide,
    Token,
    levels_from_raw,
    levels_to_raw,
    normalize_token,
)

logger = logging.getLogger(__name__)


class QuoteService:
    """Prices token pairs from the (cached) price levels of eligible makers."""

    def __init__(
        self,
        exchange_name: str,
        network: int,
        cache: CacheInterface,
        api: RfqApi,
        maker_filter: MarketMakerFilter,
        router_address: str,
        price_provider: Optional[TokenPriceProvider] = None,
        token_metadata: Optional[TokenMetadataProvider] = None,
        levels_ttl_seconds: int = 5,
        call_timeout: float = 0.15,
        pool_gas_cost: int = 100_000,
    ):
        """
        Args:
            exchange_name: Exchange key, first part of every pool identifier
            network: Network id
            cache: Shared cache holding the levels snapshot
            api: Maker directory and price level feed
            maker_filter: Source of eligible makers
            router_address: Contract reported as the address of every pool
            price_provider: USD prices, only needed for top pools
            token_metadata: Decimals for tokens makers publish without them
            levels_ttl_seconds: Lifetime of the cached levels snapshot
            call_timeout: Timeout for each external call in seconds
            pool_gas_cost: Gas cost reported with each pool's prices
        """
        self.exchange_name = exchange_name
        self.network = network
        self.cache = cache
        self.api = api
        self.maker_filter = maker_filter
        self.router_address = router_address.lower()
        self.price_provider = price_provider
        self.token_metadata = token_metadata
        self.levels_ttl_seconds = levels_ttl_seconds
        self.call_timeout = call_timeout
        self.pool_gas_cost = pool_gas_cost
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def log_prefix(self) -> str:
        return f"{self.exchange_name}-{self.network}"

    # Pool identifiers

    @staticmethod
    def pair_name(src_address: str, dest_address: str) -> str:
        return f"{src_address}_{dest_address}".lower()

    def identifier_prefix(self, src_address: str, dest_address: str) -> str:
        return f"{self.exchange_name}_{self.pair_name(src_address, dest_address)}".lower()

    def pool_identifier(self, src_address: str, dest_address: str, maker: str) -> str:
        return f"{self.identifier_prefix(src_address, dest_address)}_{maker}".lower()

    def maker_from_pool_identifier(self, pool_identifier: str, src_address: str, dest_address: str) -> str:
        prefix = self.identifier_prefix(src_address, dest_address)
        return pool_identifier.split(f"{prefix}_")[-1]

    # Price levels

    async def fetch_levels(self, makers: List[str]) -> MarketMakerLevels:
        """Fetch levels for `makers`, dropping entries that fail validation."""
        raw = await with_timeout(
            self.api.get_price_levels(self.network, makers),
            self.call_timeout,
            f"{self.exchange_name}: getPriceLevels timeout",
        )
        return levels_from_raw(
            {maker: valid_levels_entries(maker, entries) for maker, entries in (raw or {}).items()}
        )

    async def get_levels_with_cache(self) -> MarketMakerLevels:
        """
        Levels of all eligible makers, from the cache when fresh.

        A miss fetches the eligible makers and their levels, each within the
        call timeout, and caches the result for `levels_ttl_seconds`.
        """
        cached = await self.cache.get(self.exchange_name, self.network, LEVELS_CACHE_KEY)
        if cached:
            try:
                return levels_from_raw(json.loads(cached))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                self.logger.warning(f"{self.log_prefix}: ignoring unreadable levels cache: {e}")

        makers = await with_timeout(
            self.maker_filter.eligible_makers(),
            self.call_timeout,
            f"{self.exchange_name}: getFilteredMarketMakers timeout",
        )
        levels = await self.fetch_levels(makers)

        await self.cache.setex(
            self.exchange_name,
            self.network,
            LEVELS_CACHE_KEY,
            self.levels_ttl_seconds,
            json.dumps(levels_to_raw(levels)),
        )

        return levels

    # Pricing

    async def list_eligible_pools(self, src_token: Token, dest_token: Token) -> List[str]:
        """One pool identifier per maker quoting the ordered pair src -> dest."""
        src = normalize_token(src_token)
        dest = normalize_token(dest_token)

        if src.address == dest.address:
            return []

        levels = await self.get_levels_with_cache()
        pair_name = self.pair_name(src.address, dest.address)

        return [
            self.pool_identifier(src.address, dest.address, maker)
            for maker, entries in levels.items()
            if any(entry.pair.name == pair_name for entry in entries)
        ]

    async def get_prices(
        self,
        src_token: Token,
        dest_token: Token,
        amounts: Sequence[int],
        side: SwapSide,
        limit_pools: Optional[List[str]] = None,
    ) -> Optional[List[PoolPrices]]:
        """
        Price `amounts` (integer base units, non-decreasing) with every eligible maker.

        Args:
            limit_pools: Only price these pool identifiers

        Returns:
            None for a same-token pair, else one PoolPrices per maker that
            has levels for the pair
        """
        src = normalize_token(src_token)
        dest = normalize_token(dest_token)

        if src.address == dest.address:
            return None

        pools = limit_pools if limit_pools is not None else await self.list_eligible_pools(src_token, dest_token)
        makers_to_use = {
            self.maker_from_pool_identifier(pool, src.address, dest.address) for pool in pools
        }

        levels_map = await self.get_levels_with_cache()
        pair_name = self.pair_name(src.address, dest.address)

        amount_decimals = src.decimals if side == SwapSide.SELL else dest.decimals
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            amounts_raw = [Decimal(int(amount)).scaleb(-amount_decimals) for amount in amounts]

        results = []
        for maker, entries in levels_map.items():
            if maker.lower() not in makers_to_use:
                continue

            entry = next((e for e in entries if e.pair.name == pair_name), None)
            if entry is None:
                continue

            unit = prices_for_amounts([ONE], entry.levels, src, dest, side)[0]
            prices = prices_for_amounts(amounts_raw, entry.levels, src, dest, side)

            results.append(
                PoolPrices(
                    prices=prices,
                    unit=unit,
                    gas_cost=self.pool_gas_cost,
                    exchange=self.exchange_name,
                    pool_identifier=self.pool_identifier(src.address, dest.address, maker),
                    pool_addresses=[self.router_address],
                    data={"mm": maker},
                )
            )

        return results

    async def _resolve_decimals(self, address: str, known: int) -> int:
        if known or self.token_metadata is None:
            return known
        return await self.token_metadata.get_decimals(address)

    async def top_pools_for_token(self, token_address: str, limit: int) -> List[PoolLiquidity]:
        """
        Makers' pairs with `token_address` as base, ranked by USD depth.

        Bypasses the levels cache. Decimals come from the first maker quoting
        the token as base; tokens a maker publishes without decimals are
        looked up through the token metadata provider, when one is set.
        """
        if self.price_provider is None:
            raise ValueError(f"{self.log_prefix}: a token price provider is required for top pools")

        address = token_address.lower()

        makers = await with_timeout(
            self.maker_filter.eligible_makers(),
            self.call_timeout,
            f"{self.exchange_name}: getFilteredMarketMakers timeout",
        )
        levels = await self.fetch_levels(makers)

        entries = [
            entry
            for maker in makers
            for entry in levels.get(maker, [])
            if entry.pair.base_token == address
        ]
        if not entries:
            return []

        base_token = Token(
            address=address,
            decimals=await self._resolve_decimals(address, entries[0].pair.base_token_decimals),
        )
        base_token_price_usd = await self.price_provider.get_token_usd_price(
            base_token, 10 ** base_token.decimals
        )

        pools = []
        for entry in entries:
            connector = Token(
                address=entry.pair.quote_token,
                decimals=await self._resolve_decimals(
                    entry.pair.quote_token, entry.pair.quote_token_decimals
                ),
                symbol=entry.pair.quote_token_name,
            )
            pools.append(
                PoolLiquidity(
                    exchange=self.exchange_name,
                    address=self.router_address,
                    connector_tokens=[connector],
                    liquidity_usd=compute_max_liquidity(entry.levels, base_token_price_usd),
                )
            )

        pools.sort(key=lambda pool: pool.liquidity_usd, reverse=True)
        return pools[:limit]
