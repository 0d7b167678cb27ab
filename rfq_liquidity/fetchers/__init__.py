"""
Data sources consumed by the RFQ core.
"""

from .base import RfqApi, TokenPriceProvider
from .tokens import TokenMetadataProvider

__all__ = ["RfqApi", "TokenPriceProvider", "TokenMetadataProvider"]
