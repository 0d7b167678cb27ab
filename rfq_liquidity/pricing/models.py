"""
Data models for market maker price levels and pricing results.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.chains import ETHER_ADDRESS, ZERO_ADDRESS


class SwapSide(str, Enum):
    """SELL fixes the input amount, BUY fixes the output amount."""
    SELL = "SELL"
    BUY = "BUY"


@dataclass(frozen=True)
class Token:
    address: str
    decimals: int = 0
    symbol: Optional[str] = None


def normalize_token(token: Token) -> Token:
    """
    Lower-case the address and map the native-asset sentinel to the zero
    address, which is how RFQ makers identify native-asset trades.
    """
    address = token.address.lower()
    if address == ETHER_ADDRESS:
        address = ZERO_ADDRESS
    return Token(address=address, decimals=token.decimals, symbol=token.symbol)


@dataclass(frozen=True)
class PriceLevel:
    """
    One tier of a maker's book.

    `level` is the cumulative base amount reached at the end of the tier and
    `price` the quote-per-base rate for the base amount added by this tier.
    """
    level: Decimal
    price: Decimal

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "PriceLevel":
        return cls(level=Decimal(str(raw["level"])), price=Decimal(str(raw["price"])))

    def to_raw(self) -> Dict[str, str]:
        return {"level": str(self.level), "price": str(self.price)}


@dataclass(frozen=True)
class TokenPair:
    """Ordered pair a maker quotes, addresses lower-cased."""
    base_token: str
    quote_token: str
    base_token_name: Optional[str] = None
    quote_token_name: Optional[str] = None
    base_token_decimals: int = 0
    quote_token_decimals: int = 0

    @property
    def name(self) -> str:
        return f"{self.base_token}_{self.quote_token}"

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "TokenPair":
        return cls(
            base_token=raw["baseToken"].lower(),
            quote_token=raw["quoteToken"].lower(),
            base_token_name=raw.get("baseTokenName"),
            quote_token_name=raw.get("quoteTokenName"),
            base_token_decimals=int(raw.get("baseTokenDecimals") or 0),
            quote_token_decimals=int(raw.get("quoteTokenDecimals") or 0),
        )

    def to_raw(self) -> Dict[str, Any]:
        return {
            "baseToken": self.base_token,
            "quoteToken": self.quote_token,
            "baseTokenName": self.base_token_name,
            "quoteTokenName": self.quote_token_name,
            "baseTokenDecimals": self.base_token_decimals,
            "quoteTokenDecimals": self.quote_token_decimals,
        }


@dataclass
class LevelsEntry:
    """Price levels one maker publishes for one pair."""
    pair: TokenPair
    levels: List[PriceLevel]

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "LevelsEntry":
        return cls(
            pair=TokenPair.from_raw(raw["pair"]),
            levels=[PriceLevel.from_raw(level) for level in raw.get("levels", [])],
        )

    def to_raw(self) -> Dict[str, Any]:
        return {
            "pair": self.pair.to_raw(),
            "levels": [level.to_raw() for level in self.levels],
        }


# Maker id -> every pair that maker currently quotes
MarketMakerLevels = Dict[str, List[LevelsEntry]]


def levels_from_raw(raw: Dict[str, List[Dict[str, Any]]]) -> MarketMakerLevels:
    return {
        maker: [LevelsEntry.from_raw(entry) for entry in (entries or [])]
        for maker, entries in raw.items()
    }


def levels_to_raw(levels: MarketMakerLevels) -> Dict[str, List[Dict[str, Any]]]:
    return {
        maker: [entry.to_raw() for entry in entries]
        for maker, entries in levels.items()
    }


@dataclass
class PoolPrices:
    """Prices one maker offers for the requested amounts."""
    prices: List[int]
    unit: int
    gas_cost: int
    exchange: str
    pool_identifier: str
    pool_addresses: List[str]
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PoolLiquidity:
    exchange: str
    address: str
    connector_tokens: List[Token]
    liquidity_usd: float
