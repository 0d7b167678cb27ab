"""
RFQ exchange facade.

Wires the maker filter, quote service and transaction preprocessor for one
(exchange, network) pair and exposes them the way the aggregator calls a
liquidity source.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from web3 import Web3

from ..config.manager import ConfigManager
from ..core.storage.base import CacheInterface
from ..execution.gas import compute_gas_estimate_overhead
from ..execution.models import ExchangeTxInfo, OptimalSwapExchange, PreprocessOptions
from ..execution.preprocess import TransactionPreprocessor
from ..fetchers.base import RfqApi, TokenPriceProvider
from ..fetchers.tokens import TokenMetadataProvider
from ..makers.restrictions import MarketMakerFilter
from ..pricing.models import PoolLiquidity, PoolPrices, SwapSide, Token
from ..pricing.quotes import QuoteService
from ..utils.async_helpers import drain_background_tasks
from ..validation.schemas import FirmRateResponse
from ..validation.validators import validate_and_cast

logger = logging.getLogger(__name__)


class RfqExchange:
    """
    One RFQ liquidity source on one network.

    Each market maker quoting a pair is exposed as a separate pool. Prices
    come from the makers' published price levels; a trade is only built
    after the chosen maker signs a firm quote that passes the slippage check.
    """

    def __init__(
        self,
        exchange_name: str,
        network: int,
        cache: CacheInterface,
        api: RfqApi,
        router_address: str,
        executor_address: str,
        price_provider: Optional[TokenPriceProvider] = None,
        token_metadata: Optional[TokenMetadataProvider] = None,
        cache_prefix: str = "cache",
        disabled_makers: Optional[Iterable[str]] = None,
        trusted_takers: Optional[Sequence[str]] = None,
        call_timeout: float = 0.15,
        levels_ttl_seconds: int = 5,
        restrict_ttl_seconds: int = 60 * 60,
        blacklist_ttl_seconds: int = 60 * 60 * 24 * 180,
        pool_gas_cost: int = 100_000,
    ):
        self.exchange_name = exchange_name
        self.network = network
        self.cache = cache
        self.api = api
        self.token_metadata = token_metadata or TokenMetadataProvider()
        self.trusted_takers = [t.lower() for t in (trusted_takers or [executor_address])]
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.maker_filter = MarketMakerFilter(
            exchange_name,
            network,
            cache,
            api,
            cache_prefix=cache_prefix,
            disabled_makers=disabled_makers,
            restrict_ttl_seconds=restrict_ttl_seconds,
            blacklist_ttl_seconds=blacklist_ttl_seconds,
        )
        self.quotes = QuoteService(
            exchange_name,
            network,
            cache,
            api,
            self.maker_filter,
            router_address,
            price_provider=price_provider,
            token_metadata=self.token_metadata,
            levels_ttl_seconds=levels_ttl_seconds,
            call_timeout=call_timeout,
            pool_gas_cost=pool_gas_cost,
        )
        self.preprocessor = TransactionPreprocessor(
            exchange_name,
            network,
            api,
            self.maker_filter,
            executor_address,
            call_timeout=call_timeout,
        )

    @classmethod
    def from_config(
        cls,
        config: ConfigManager,
        cache: CacheInterface,
        api: RfqApi,
        price_provider: Optional[TokenPriceProvider] = None,
        token_metadata: Optional[TokenMetadataProvider] = None,
    ) -> "RfqExchange":
        """
        Build the exchange for the configured network.

        Without an explicit token metadata provider, decimals are read on-chain
        through the network's configured RPC endpoint.
        """
        rfq = config.rfq
        if token_metadata is None:
            web3 = Web3(Web3.HTTPProvider(config.chains.get_rpc_url(rfq.NETWORK)))
            token_metadata = TokenMetadataProvider(web3=web3)
        return cls(
            rfq.EXCHANGE_NAME,
            rfq.NETWORK,
            cache,
            api,
            router_address=rfq.router_address,
            executor_address=rfq.EXECUTOR_ADDRESS,
            price_provider=price_provider,
            token_metadata=token_metadata,
            cache_prefix=config.cache.CACHE_PREFIX,
            disabled_makers=rfq.DISABLED_MMS,
            trusted_takers=rfq.TRUSTED_TAKERS,
            call_timeout=rfq.async_call_timeout,
            levels_ttl_seconds=rfq.PRICE_LEVELS_TTL_SECONDS,
            restrict_ttl_seconds=rfq.MM_RESTRICT_TTL_SECONDS,
            blacklist_ttl_seconds=rfq.BLACKLIST_TTL_SECONDS,
            pool_gas_cost=rfq.POOL_GAS_COST,
        )

    async def get_pool_identifiers(
        self, src_token: Token, dest_token: Token, side: SwapSide
    ) -> List[str]:
        return await self.quotes.list_eligible_pools(src_token, dest_token)

    async def get_prices_volume(
        self,
        src_token: Token,
        dest_token: Token,
        amounts: Sequence[int],
        side: SwapSide,
        limit_pools: Optional[List[str]] = None,
    ) -> Optional[List[PoolPrices]]:
        return await self.quotes.get_prices(src_token, dest_token, amounts, side, limit_pools)

    async def preprocess_transaction(
        self,
        optimal_swap_exchange: OptimalSwapExchange,
        src_token: Token,
        dest_token: Token,
        side: SwapSide,
        options: PreprocessOptions,
    ) -> Tuple[OptimalSwapExchange, ExchangeTxInfo]:
        return await self.preprocessor.preprocess(
            optimal_swap_exchange, src_token, dest_token, side, options
        )

    def get_calldata_gas_cost(self, pool_prices: Optional[PoolPrices] = None) -> int:
        """Extra calldata gas of an RFQ trade; the same for every pool."""
        return compute_gas_estimate_overhead()

    async def get_top_pools_for_token(self, token_address: str, limit: int) -> List[PoolLiquidity]:
        return await self.quotes.top_pools_for_token(token_address, limit)

    def get_token_from_address(self, address: str) -> Token:
        return self.token_metadata.token_from_address(address)

    def validate_firm_rate(self, payload: Dict[str, Any]) -> FirmRateResponse:
        """
        Validate a signed order against the trusted takers of this exchange.

        Raises:
            ValidationError: For the first offending field
        """
        return validate_and_cast(
            payload,
            FirmRateResponse,
            context={"trusted_takers": self.trusted_takers},
        )

    async def release_resources(self) -> None:
        """Wait for pending cache cleanups started by this process."""
        await drain_background_tasks()
