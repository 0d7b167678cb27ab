"""
Reusable field types for maker responses.

Each type first checks the JSON shape (a non-empty string) and then its
meaning (parses as a number, is a valid address, ...).
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Annotated, List

from eth_utils import is_address
from pydantic import AfterValidator, Field, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]

_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
_PREFIXED_INTEGER_PATTERN = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")


def parse_number(value: str) -> Decimal:
    """Parse a decimal string; raises ValueError for anything that is not a finite number."""
    candidate = value.strip()
    if not _DECIMAL_PATTERN.match(candidate):
        raise ValueError(f"{value} is not a number")
    try:
        number = Decimal(candidate)
    except InvalidOperation:
        raise ValueError(f"{value} is not a number")
    if not number.is_finite():
        raise ValueError(f"{value} is not a number")
    return number


def parse_big_int(value: str) -> int:
    """Parse a decimal or 0x/0o/0b prefixed integer string."""
    candidate = value.strip()
    if _PREFIXED_INTEGER_PATTERN.match(candidate):
        return int(candidate, 0)
    if _INTEGER_PATTERN.match(candidate):
        return int(candidate, 10)
    raise ValueError(f"{value} is not castable to BigInt")


def _number_string(value: str) -> str:
    parse_number(value)
    return value


def _non_negative_big_int_string(value: str) -> str:
    if parse_big_int(value) < 0:
        raise ValueError(f"{value} is < 0")
    return value


def _hex_string(value: str) -> str:
    if not value.startswith("0x"):
        raise ValueError(f"{value} is not 0x-prefixed hex")
    return value


def _address(value: str) -> str:
    if not is_address(value):
        raise ValueError(f"'{value}' is not valid address")
    return value.lower()


# Decimal number carried as a string, e.g. "1.25"
NumberString = Annotated[NonEmptyStr, AfterValidator(_number_string)]

# Non-negative integer carried as a string, e.g. a token amount in base units
BigIntString = Annotated[NonEmptyStr, AfterValidator(_non_negative_big_int_string)]

HexString = Annotated[NonEmptyStr, AfterValidator(_hex_string)]

# EVM address, lower-cased once validated
Address = Annotated[str, AfterValidator(_address)]

# [price, amount]
PriceTier = Annotated[List[NumberString], Field(min_length=2, max_length=2)]
