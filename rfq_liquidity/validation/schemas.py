"""
Schemas for data received from market makers.

Structural rules (types, required fields, lengths) are declared on the
fields; cross-field rules run afterwards in model validators.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..config.rfq import AUGUSTUS_SWAPPER_ADDRESS
from .fields import (
    Address,
    BigIntString,
    HexString,
    NonEmptyStr,
    NumberString,
    PriceTier,
    parse_number,
)

TOKEN_TYPES = ("ERC20",)

DEFAULT_TRUSTED_TAKERS = (AUGUSTUS_SWAPPER_ADDRESS,)

# Upper bound for the lowest ask when no ask is lower
_MIN_ASK_CEILING = Decimal("123456789012345678901234567890")


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TokenSchema(_StrictModel):
    symbol: NonEmptyStr
    name: NonEmptyStr
    address: NonEmptyStr
    description: Optional[NonEmptyStr] = None
    decimals: int = Field(ge=1)
    type: str

    @field_validator("type")
    @classmethod
    def _validate_type(cls, v: str) -> str:
        if v not in TOKEN_TYPES:
            raise ValueError(f"must be one of {list(TOKEN_TYPES)}")
        return v


class TokensResponse(_StrictModel):
    tokens: Optional[Dict[NonEmptyStr, TokenSchema]] = None


class PairSchema(_StrictModel):
    base: NonEmptyStr
    quote: NonEmptyStr
    liquidity_usd: float = Field(alias="liquidityUSD", ge=0)


class PairsResponse(_StrictModel):
    pairs: Optional[Dict[str, PairSchema]] = None


class BlacklistResponse(_StrictModel):
    blacklist: Optional[List[Address]] = None


class PriceBook(_StrictModel):
    """Bids and asks of one pair as [price, amount] tiers."""

    bids: Optional[List[PriceTier]] = None
    asks: Optional[List[PriceTier]] = None

    @model_validator(mode="after")
    def _bids_lower_than_asks(self) -> "PriceBook":
        if not self.bids or not self.asks:
            return self

        max_bid = max([Decimal(0)] + [parse_number(tier[0]) for tier in self.bids])
        min_ask = min([_MIN_ASK_CEILING] + [parse_number(tier[0]) for tier in self.asks])
        if max_bid >= min_ask:
            raise ValueError("the maximum bid is higher than minimum ask")
        return self


class PricesResponse(_StrictModel):
    prices: Optional[Dict[NonEmptyStr, PriceBook]] = None


class OrderWithSignature(BaseModel):
    """
    Signed order returned by a maker for a firm rate.

    The taker must be one of the trusted routers, passed in the validation
    context as `trusted_takers`; without a context the aggregator's router
    is the only trusted taker.
    """

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    nonce_and_meta: Optional[BigIntString] = None
    expiry: Optional[float] = Field(default=None, ge=0)
    maker: Address
    taker: Address
    maker_asset: Address
    taker_asset: Address
    maker_amount: BigIntString
    taker_amount: BigIntString
    signature: Optional[HexString] = None

    @field_validator("taker")
    @classmethod
    def _must_be_trusted_taker(cls, v: str, info: ValidationInfo) -> str:
        context = info.context or {}
        allowed = [t.lower() for t in context.get("trusted_takers", DEFAULT_TRUSTED_TAKERS)]
        if v.lower() not in allowed:
            raise ValueError(f"must be any of {allowed}")
        return v


class FirmRateResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    order: OrderWithSignature


class LevelsPairSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    base_token: Address = Field(alias="baseToken")
    quote_token: Address = Field(alias="quoteToken")
    base_token_name: Optional[str] = Field(default=None, alias="baseTokenName")
    quote_token_name: Optional[str] = Field(default=None, alias="quoteTokenName")
    base_token_decimals: int = Field(default=0, ge=0, alias="baseTokenDecimals")
    quote_token_decimals: int = Field(default=0, ge=0, alias="quoteTokenDecimals")


class LevelSchema(_StrictModel):
    level: NumberString
    price: NumberString


class LevelsEntrySchema(BaseModel):
    """One pair's price levels; sizes strictly increase and prices are positive."""

    model_config = ConfigDict(extra="allow")

    pair: LevelsPairSchema
    levels: List[LevelSchema]

    @model_validator(mode="after")
    def _levels_are_ordered(self) -> "LevelsEntrySchema":
        previous = None
        for index, entry in enumerate(self.levels):
            size = parse_number(entry.level)
            if size < 0:
                raise ValueError(f"level {index} has a negative size")
            if parse_number(entry.price) <= 0:
                raise ValueError(f"level {index} has a non-positive price")
            if previous is not None and size <= previous:
                raise ValueError("levels must be strictly increasing")
            previous = size
        return self


class PriceLevelsResponse(RootModel[Dict[NonEmptyStr, List[LevelsEntrySchema]]]):
    pass
