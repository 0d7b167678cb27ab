"""
Token metadata lookups.

The RFQ exchange publishes no token list of its own. Decimals are taken from
a static map, then from the ERC20 contract when a web3 connection is
available, and default to 0 otherwise.
"""

import asyncio
import logging
from typing import Dict, Optional

from web3 import Web3

from ..pricing.models import Token

logger = logging.getLogger(__name__)

ERC20_DECIMALS_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class TokenMetadataProvider:
    """Resolve token decimals for addresses the caller has no metadata for."""

    def __init__(
        self,
        known_decimals: Optional[Dict[str, int]] = None,
        web3: Optional[Web3] = None,
    ):
        """
        Args:
            known_decimals: Decimals by address, checked first
            web3: Optional connection used for on-chain `decimals()` calls
        """
        self.web3 = web3
        self._decimals: Dict[str, int] = {
            address.lower(): decimals for address, decimals in (known_decimals or {}).items()
        }

    def token_from_address(self, address: str) -> Token:
        """Token with unknown decimals; pricing does not need them here."""
        return Token(address=address, decimals=0)

    async def get_decimals(self, address: str) -> int:
        """
        Decimals for `address`, or 0 when nothing is known about it.

        On-chain results are memoized; failed lookups are not.
        """
        address = address.lower()
        if address in self._decimals:
            return self._decimals[address]

        if self.web3 is None:
            return 0

        try:
            decimals = await asyncio.to_thread(self._fetch_decimals, address)
        except Exception as e:
            logger.warning(f"Failed to fetch decimals for {address}: {e}")
            return 0

        self._decimals[address] = decimals
        return decimals

    def _fetch_decimals(self, address: str) -> int:
        contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(address), abi=ERC20_DECIMALS_ABI
        )
        return int(contract.functions.decimals().call())

    async def get_token(self, address: str) -> Token:
        return Token(address=address.lower(), decimals=await self.get_decimals(address))
