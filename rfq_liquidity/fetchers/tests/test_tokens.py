"""Tests for token metadata lookups."""
import pytest
from unittest.mock import Mock

from rfq_liquidity.fetchers import TokenMetadataProvider
from rfq_liquidity.pricing.models import Token

WBTC = "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"


@pytest.fixture
def web3():
    w3 = Mock()
    w3.eth.contract.return_value.functions.decimals.return_value.call.return_value = 8
    return w3


class TestTokenMetadataProvider:

    def test_token_from_address_has_no_decimals(self):
        assert TokenMetadataProvider().token_from_address(USDC) == Token(address=USDC, decimals=0)

    @pytest.mark.asyncio
    async def test_known_decimals_first(self, web3):
        provider = TokenMetadataProvider({USDC.upper().replace("0X", "0x"): 6}, web3=web3)

        assert await provider.get_decimals(USDC) == 6
        web3.eth.contract.assert_not_called()

    @pytest.mark.asyncio
    async def test_onchain_lookup_memoized(self, web3):
        provider = TokenMetadataProvider(web3=web3)

        assert await provider.get_decimals(WBTC) == 8
        assert await provider.get_decimals(WBTC) == 8
        assert web3.eth.contract.call_count == 1

    @pytest.mark.asyncio
    async def test_unknown_without_web3(self):
        assert await TokenMetadataProvider().get_decimals(WBTC) == 0

    @pytest.mark.asyncio
    async def test_failed_lookup_defaults_to_zero(self, web3):
        web3.eth.contract.side_effect = Exception("rpc down")
        provider = TokenMetadataProvider(web3=web3)

        assert await provider.get_decimals(WBTC) == 0
        assert web3.eth.contract.call_count == 1

    @pytest.mark.asyncio
    async def test_get_token(self, web3):
        token = await TokenMetadataProvider(web3=web3).get_token(WBTC)
        assert token == Token(address=WBTC, decimals=8)
