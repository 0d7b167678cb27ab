"""
Firm quote responses and the trade objects preprocessing works on.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..validation.fields import Address, BigIntString, NonEmptyStr

MAX_UINT256 = 2**256 - 1


class RfqType(IntEnum):
    """Taker-firm (RFQ-T) or maker-firm (RFQ-M) quote."""
    RFQT = 0
    RFQM = 1


class QuoteData(BaseModel):
    """Terms a maker commits to in a firm quote."""

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    rfq_type: int
    pool: Address
    eoa: Optional[Address] = None
    trader: Address
    effective_trader: Optional[Address] = None
    base_token: Address
    quote_token: Address
    base_token_amount: BigIntString
    quote_token_amount: BigIntString
    quote_expiry: int = Field(default=0, ge=0)
    nonce: Optional[int] = None
    txid: NonEmptyStr


class RfqResponse(BaseModel):
    """
    Raw answer to a firm quote request.

    Only the shape is checked here; whether the answer is usable is decided
    by preprocessing.
    """

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    status: str
    quote_data: Optional[QuoteData] = None
    signature: Optional[str] = None
    gas_estimate: Optional[int] = None
    error: Optional[Any] = None


@dataclass
class OptimalSwapExchange:
    """
    Maker chosen by the aggregator for (part of) a trade.

    Amounts are integer base units. `data` carries the maker id as `mm`
    before preprocessing and the firm quote afterwards.
    """
    src_amount: int
    dest_amount: int
    data: Dict[str, Any] = field(default_factory=dict)
    exchange: Optional[str] = None
    pool_addresses: Optional[list] = None


@dataclass
class PreprocessOptions:
    tx_origin: str
    slippage_factor: Decimal


@dataclass
class ExchangeTxInfo:
    deadline: int
