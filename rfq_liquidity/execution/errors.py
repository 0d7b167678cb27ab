"""
Errors raised while turning a chosen maker into an executable trade.
"""


class RfqError(Exception):
    """The firm quote request failed or returned an unusable quote."""
    pass


class SlippageCheckError(RfqError):
    """The firm quote moved against the trader beyond the allowed slippage."""
    pass


class UserBlacklistedError(RfqError):
    """The trade origin is blacklisted and will not be served."""

    def __init__(self, message: str, address: str):
        super().__init__(message)
        self.address = address
