"""Tests for firm quote preprocessing and the slippage guard."""
import asyncio
from decimal import Decimal

import pytest
from unittest.mock import AsyncMock

from rfq_liquidity.config.chains import ETHER_ADDRESS, ZERO_ADDRESS
from rfq_liquidity.core.storage.memory import InMemoryCache
from rfq_liquidity.execution import (
    MAX_UINT256,
    OptimalSwapExchange,
    PreprocessOptions,
    RfqError,
    SlippageCheckError,
    TransactionPreprocessor,
    UserBlacklistedError,
    check_slippage,
    compute_gas_estimate_overhead,
)
from rfq_liquidity.makers.restrictions import MarketMakerFilter
from rfq_liquidity.pricing.models import SwapSide, Token
from rfq_liquidity.utils.async_helpers import AsyncCallTimeoutError, drain_background_tasks

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
POOL = "0x52bc44d5378309ee2abf1539bf71de1b7d7be3b5"
EXECUTOR = "0xdef171fe48cf0115b1d80b88dc8eab59176fee57"
USER = "0x1111111254eeb25477b68fb85ed929f73a960582"

NOW_MS = 1_700_000_000_000


def rfq_response(base_token=WETH, quote_token=USDC, base_amount="1000", quote_amount="100", **overrides):
    response = {
        "status": "success",
        "quoteData": {
            "rfqType": 0,
            "pool": POOL,
            "eoa": None,
            "trader": EXECUTOR,
            "effectiveTrader": USER,
            "baseToken": base_token,
            "quoteToken": quote_token,
            "baseTokenAmount": base_amount,
            "quoteTokenAmount": quote_amount,
            "quoteExpiry": 1_700_000_060,
            "nonce": 7,
            "txid": "0x" + "ab" * 32,
        },
        "signature": "0x" + "cd" * 65,
        "gasEstimate": 120000,
    }
    response.update(overrides)
    return response


class TestCheckSlippage:
    """Firm quote amounts against the priced amounts."""

    def test_sell_below_factor_fails(self):
        with pytest.raises(SlippageCheckError):
            check_slippage(SwapSide.SELL, 1000, 100, 1000, 98, Decimal("0.99"))

    def test_sell_at_factor_passes(self):
        check_slippage(SwapSide.SELL, 1000, 100, 1000, 99, Decimal("0.99"))

    def test_sell_threshold_rounds_half_up(self):
        """0.995 * 101 = 100.495 rounds to 100."""
        check_slippage(SwapSide.SELL, 1000, 101, 1000, 100, Decimal("0.995"))
        with pytest.raises(SlippageCheckError):
            check_slippage(SwapSide.SELL, 1000, 101, 1000, 99, Decimal("0.995"))

    def test_buy_short_output_fails(self):
        with pytest.raises(SlippageCheckError, match="quoteTokenAmount 99 < destAmount 100"):
            check_slippage(SwapSide.BUY, 1000, 100, 1000, 99, Decimal("1.01"))

    def test_buy_input_above_factor_fails(self):
        with pytest.raises(SlippageCheckError, match="baseTokenAmount 1011"):
            check_slippage(SwapSide.BUY, 1000, 100, 1011, 100, Decimal("1.01"))

    def test_buy_within_factor_passes(self):
        check_slippage(SwapSide.BUY, 1000, 100, 1010, 100, Decimal("1.01"))

    def test_large_amounts_compared_exactly(self):
        with pytest.raises(SlippageCheckError):
            check_slippage(SwapSide.SELL, 1, 10**40 + 1, 1, 10**40, Decimal("1"))
        with pytest.raises(SlippageCheckError):
            check_slippage(SwapSide.BUY, 10**40, 1, 10**40 + 1, 1, Decimal("1"))

    def test_slippage_is_an_rfq_error(self):
        assert issubclass(SlippageCheckError, RfqError)


class TestPreprocess:
    """Firm quote acquisition for the chosen maker."""

    @pytest.fixture
    def cache(self):
        return InMemoryCache()

    @pytest.fixture
    def api(self):
        mock = AsyncMock()
        mock.request_quote.return_value = rfq_response()
        return mock

    @pytest.fixture
    def maker_filter(self, cache, api):
        return MarketMakerFilter("Hashflow", 1, cache, api, clock=lambda: NOW_MS)

    @pytest.fixture
    def preprocessor(self, api, maker_filter):
        return TransactionPreprocessor("Hashflow", 1, api, maker_filter, EXECUTOR, call_timeout=1)

    @pytest.fixture
    def swap(self):
        return OptimalSwapExchange(src_amount=1000, dest_amount=100, data={"mm": "mm1"})

    @pytest.fixture
    def options(self):
        return PreprocessOptions(tx_origin=USER, slippage_factor=Decimal("0.99"))

    async def restricted_makers(self, maker_filter, cache):
        await drain_background_tasks()
        return set(await cache.hgetall(maker_filter.restrict_hash_key))

    @pytest.mark.asyncio
    async def test_sell_success(self, preprocessor, api, swap, options):
        enriched, tx_info = await preprocessor.preprocess(
            swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options
        )

        params = api.request_quote.await_args.args[0]
        assert params == {
            "chainId": 1,
            "baseToken": WETH,
            "quoteToken": USDC,
            "wallet": EXECUTOR,
            "effectiveTrader": USER,
            "marketMakers": ["mm1"],
            "baseTokenAmount": "1000",
        }

        assert enriched.data["mm"] == "mm1"
        assert enriched.data["quote_data"].quote_token_amount == "100"
        assert enriched.data["signature"] == "0x" + "cd" * 65
        assert enriched.data["gas_estimate"] == 120000
        assert enriched.src_amount == 1000
        assert swap.data == {"mm": "mm1"}
        assert tx_info.deadline == 1_700_000_060

    @pytest.mark.asyncio
    async def test_buy_requests_quote_amount(self, preprocessor, api, swap):
        options = PreprocessOptions(tx_origin=USER, slippage_factor=Decimal("1.01"))

        await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.BUY, options)

        params = api.request_quote.await_args.args[0]
        assert params["quoteTokenAmount"] == "100"
        assert "baseTokenAmount" not in params

    @pytest.mark.asyncio
    async def test_native_asset_normalized(self, preprocessor, api, swap, options):
        api.request_quote.return_value = rfq_response(base_token=ZERO_ADDRESS)

        await preprocessor.preprocess(
            swap, Token(ETHER_ADDRESS, 18), Token(USDC, 6), SwapSide.SELL, options
        )

        assert api.request_quote.await_args.args[0]["baseToken"] == ZERO_ADDRESS

    @pytest.mark.asyncio
    async def test_zero_expiry_means_no_deadline(self, preprocessor, api, swap, options):
        response = rfq_response()
        response["quoteData"]["quoteExpiry"] = 0
        api.request_quote.return_value = response

        _, tx_info = await preprocessor.preprocess(
            swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options
        )

        assert tx_info.deadline == MAX_UINT256

    @pytest.mark.asyncio
    async def test_slippage_restricts_maker(self, preprocessor, api, maker_filter, cache, swap, options):
        api.request_quote.return_value = rfq_response(quote_amount="98")

        with pytest.raises(SlippageCheckError):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)

        assert await self.restricted_makers(maker_filter, cache) == {"mm1"}

    @pytest.mark.asyncio
    async def test_blacklisted_user_rejected(self, preprocessor, api, maker_filter, swap, options):
        await maker_filter.blacklist(USER)

        with pytest.raises(UserBlacklistedError) as exc_info:
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)

        assert exc_info.value.address == USER
        assert "mm1" not in str(exc_info.value)
        api.request_quote.assert_not_called()

    @pytest.mark.asyncio
    async def test_timeout_restricts_maker(self, preprocessor, api, maker_filter, cache, swap, options):
        async def slow(params):
            await asyncio.sleep(1)

        api.request_quote.side_effect = slow
        preprocessor.call_timeout = 0.01

        with pytest.raises(AsyncCallTimeoutError, match="requestQuote timeout"):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)

        assert await self.restricted_makers(maker_filter, cache) == {"mm1"}

    @pytest.mark.asyncio
    async def test_user_restricted_signal_blacklists_user(
        self, preprocessor, api, maker_filter, cache, swap, options
    ):
        api.request_quote.side_effect = Exception("403: User is restricted from using Hashflow")

        with pytest.raises(Exception, match="User is restricted"):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)

        assert await maker_filter.is_blacklisted(USER) is True
        assert await self.restricted_makers(maker_filter, cache) == set()

    @pytest.mark.parametrize("overrides,match", [
        ({"status": "fail"}, "Failed to fetch RFQ"),
        ({"quoteData": None}, "Missing quote data"),
        ({"signature": None}, "Missing signature"),
        ({"gasEstimate": None}, "No gas estimate"),
    ])
    @pytest.mark.asyncio
    async def test_unusable_response_restricts_maker(
        self, preprocessor, api, maker_filter, cache, swap, options, overrides, match
    ):
        api.request_quote.return_value = rfq_response(**overrides)

        with pytest.raises(RfqError, match=match):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)

        assert await self.restricted_makers(maker_filter, cache) == {"mm1"}

    @pytest.mark.asyncio
    async def test_rfqm_quote_rejected(self, preprocessor, api, swap, options):
        response = rfq_response()
        response["quoteData"]["rfqType"] = 1
        api.request_quote.return_value = response

        with pytest.raises(RfqError, match="Invalid RFQ type"):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)
        await drain_background_tasks()

    @pytest.mark.asyncio
    async def test_token_mismatch_rejected(self, preprocessor, api, swap, options):
        api.request_quote.return_value = rfq_response(quote_token=POOL)

        with pytest.raises(RfqError, match="is different from destToken"):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)
        await drain_background_tasks()

    @pytest.mark.asyncio
    async def test_malformed_response_rejected(self, preprocessor, api, swap, options):
        api.request_quote.return_value = {"quoteData": {}}

        with pytest.raises(RfqError, match="Malformed response"):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)
        await drain_background_tasks()

    @pytest.mark.asyncio
    async def test_missing_maker(self, preprocessor, options):
        swap = OptimalSwapExchange(src_amount=1000, dest_amount=100, data={})

        with pytest.raises(ValueError, match="MM was not provided"):
            await preprocessor.preprocess(swap, Token(WETH, 18), Token(USDC, 6), SwapSide.SELL, options)


class TestGasOverhead:

    def test_overhead(self):
        assert compute_gas_estimate_overhead() == 2640 + 320 * 3 + 200 * 4 + 512 + 512 * 2 + 40
