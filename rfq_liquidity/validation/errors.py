"""
Validation error raised for malformed maker data.
"""

from typing import Optional


class ValidationError(Exception):
    """
    Maker data failed a structural or semantic check.

    Attributes:
        raw_message: Reason without the field path
        key: Path of the offending field, e.g. `prices.ETH_USDC.bids[0][1]`
    """

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(f"'{key}': {message}" if key is not None else message)
        self.raw_message = message
        self.key = key
