"""
Firm quote acquisition, slippage checks and calldata gas estimates.
"""

from .errors import RfqError, SlippageCheckError, UserBlacklistedError
from .gas import compute_gas_estimate_overhead
from .models import (
    MAX_UINT256,
    ExchangeTxInfo,
    OptimalSwapExchange,
    PreprocessOptions,
    QuoteData,
    RfqResponse,
    RfqType,
)
from .preprocess import TransactionPreprocessor, check_slippage

__all__ = [
    "RfqError",
    "SlippageCheckError",
    "UserBlacklistedError",
    "compute_gas_estimate_overhead",
    "MAX_UINT256",
    "RfqType",
    "QuoteData",
    "RfqResponse",
    "OptimalSwapExchange",
    "PreprocessOptions",
    "ExchangeTxInfo",
    "TransactionPreprocessor",
    "check_slippage",
]
