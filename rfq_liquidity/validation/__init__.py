"""
Validation of data received from market makers.

Usage:
    from rfq_liquidity.validation import PricesResponse, validate_and_cast

    prices = validate_and_cast(payload, PricesResponse)
"""

from .errors import ValidationError
from .schemas import (
    BlacklistResponse,
    FirmRateResponse,
    LevelsEntrySchema,
    OrderWithSignature,
    PairsResponse,
    PriceLevelsResponse,
    PricesResponse,
    TokensResponse,
)
from .validators import (
    format_location,
    valid_levels_entries,
    validate_address,
    validate_and_cast,
)

__all__ = [
    "ValidationError",
    "TokensResponse",
    "PairsResponse",
    "BlacklistResponse",
    "PricesResponse",
    "FirmRateResponse",
    "OrderWithSignature",
    "LevelsEntrySchema",
    "PriceLevelsResponse",
    "validate_and_cast",
    "validate_address",
    "valid_levels_entries",
    "format_location",
]
