"""
Interfaces to the services the RFQ core pulls data from.

The maker directory, the price level feed and the firm quote endpoint are
reached over the network by a transport this package does not own. The
core only depends on the abstract methods below.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
import logging

from ..pricing.models import Token

logger = logging.getLogger(__name__)


class RfqApi(ABC):
    """
    Taker-side client of an RFQ exchange.

    Every method is a network call that may fail or hang; callers bound it
    with a timeout.
    """

    @abstractmethod
    async def get_market_makers(self, chain_id: int) -> List[str]:
        """
        List the market makers active on a network.

        Args:
            chain_id: Network id

        Returns:
            Market maker identifiers
        """
        pass

    @abstractmethod
    async def get_price_levels(
        self, chain_id: int, market_makers: List[str]
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Fetch current price levels.

        Returns:
            Raw levels keyed by maker: `{maker: [{"pair": {...}, "levels": [...]}]}`
        """
        pass

    @abstractmethod
    async def request_quote(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Ask makers for a signed firm quote.

        Args:
            params: chainId, baseToken, quoteToken, baseTokenAmount or
                quoteTokenAmount, wallet, effectiveTrader, marketMakers

        Returns:
            Raw RFQ response: status, quoteData, signature, gasEstimate
        """
        pass


class TokenPriceProvider(ABC):
    """USD pricing used to rank maker liquidity."""

    @abstractmethod
    async def get_token_usd_price(self, token: Token, amount: int) -> float:
        """
        Args:
            token: Token to price
            amount: Amount in base units

        Returns:
            USD value of `amount` of `token`
        """
        pass
