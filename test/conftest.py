from typing import Any, Dict, List

import pytest

from rfq_liquidity.core.storage import InMemoryCache
from rfq_liquidity.exchange import RfqExchange
from rfq_liquidity.fetchers import RfqApi, TokenMetadataProvider, TokenPriceProvider

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
ROUTER = "0xf6a94dfd0e6ea9ddfdffe4762ad4236576136613"
EXECUTOR = "0xdef171fe48cf0115b1d80b88dc8eab59176fee57"


class StaticRfqApi(RfqApi):
    """Serves fixed makers, levels and firm quotes; records quote requests."""

    def __init__(self, makers, levels, quote=None):
        self.makers = makers
        self.levels = levels
        self.quote = quote
        self.quote_requests: List[Dict[str, Any]] = []

    async def get_market_makers(self, chain_id: int) -> List[str]:
        return list(self.makers)

    async def get_price_levels(self, chain_id: int, market_makers: List[str]) -> Dict[str, List[Dict[str, Any]]]:
        return {mm: entries for mm, entries in self.levels.items() if mm in market_makers}

    async def request_quote(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.quote_requests.append(params)
        if isinstance(self.quote, Exception):
            raise self.quote
        return self.quote


class FixedPriceProvider(TokenPriceProvider):

    def __init__(self, usd_per_token: float):
        self.usd_per_token = usd_per_token

    async def get_token_usd_price(self, token, amount: int) -> float:
        return self.usd_per_token * amount / 10 ** token.decimals


@pytest.fixture
def weth_usdc_levels():
    return {
        "mm1": [
            {
                "pair": {
                    "baseToken": WETH,
                    "quoteToken": USDC,
                    "baseTokenName": "WETH",
                    "quoteTokenName": "USDC",
                    "baseTokenDecimals": 18,
                    "quoteTokenDecimals": 6,
                },
                "levels": [
                    {"level": "0.5", "price": "2000"},
                    {"level": "10", "price": "1990"},
                ],
            }
        ],
        "mm2": [
            {
                "pair": {
                    "baseToken": WETH,
                    "quoteToken": USDC,
                    "baseTokenDecimals": 18,
                    "quoteTokenDecimals": 6,
                },
                "levels": [
                    {"level": "0", "price": "1995"},
                    {"level": "2", "price": "1995"},
                ],
            }
        ],
    }


@pytest.fixture
def firm_quote():
    return {
        "status": "success",
        "quoteData": {
            "rfqType": 0,
            "pool": "0x52bc44d5378309ee2abf1539bf71de1b7d7be3b5",
            "trader": EXECUTOR,
            "effectiveTrader": "0x1111111254eeb25477b68fb85ed929f73a960582",
            "baseToken": WETH,
            "quoteToken": USDC,
            "baseTokenAmount": str(10**18),
            "quoteTokenAmount": str(2000 * 10**6),
            "quoteExpiry": 1_700_000_060,
            "nonce": 1,
            "txid": "0x" + "01" * 32,
        },
        "signature": "0x" + "02" * 65,
        "gasEstimate": 110000,
    }


@pytest.fixture
def rfq_api(weth_usdc_levels, firm_quote):
    return StaticRfqApi(["mm1", "mm2", "mm3"], weth_usdc_levels, firm_quote)


@pytest.fixture
def memory_cache():
    return InMemoryCache()


@pytest.fixture
def exchange(memory_cache, rfq_api):
    return RfqExchange(
        "Hashflow",
        1,
        memory_cache,
        rfq_api,
        router_address=ROUTER,
        executor_address=EXECUTOR,
        price_provider=FixedPriceProvider(2000.0),
        token_metadata=TokenMetadataProvider({WETH: 18, USDC: 6}),
        disabled_makers=["mm3"],
        call_timeout=1,
    )
