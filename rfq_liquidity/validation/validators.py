"""
Entry points for validating maker data against the schemas.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union

import pydantic
from pydantic import BaseModel, TypeAdapter

from .errors import ValidationError
from .fields import Address
from .schemas import LevelsEntrySchema

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "

_address_adapter = TypeAdapter(Address)


def format_location(loc: Sequence[Union[str, int]]) -> str:
    """
    Render a field path the way the maker API documents it.

    ("prices", "ETH_USDC", "bids", 0, 1) -> "prices.ETH_USDC.bids[0][1]"
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def _first_error(error: pydantic.ValidationError) -> Tuple[str, str]:
    details = error.errors(include_url=False)[0]
    message = details["msg"]
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    return format_location(details["loc"]), message


def validate_and_cast(
    value: Any,
    schema: Type[M],
    name: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> M:
    """
    Validate `value` against `schema` and return the parsed model.

    Args:
        value: Decoded JSON received from a maker
        schema: Pydantic model describing the expected shape
        name: Label for the whole value; replaces the field path in the message
        context: Validation context, e.g. `{"trusted_takers": [...]}`

    Raises:
        ValidationError: For the first offending field
    """
    try:
        return schema.model_validate(value, context=context)
    except pydantic.ValidationError as e:
        path, message = _first_error(e)
        if name:
            raise ValidationError(f'"{name}" {message}') from e
        raise ValidationError(message, key=path or None) from e


def validate_address(value: Any) -> str:
    """
    Check an address and return it lower-cased.

    Raises:
        ValidationError: If `value` is not a valid (checksum-consistent) address
    """
    try:
        return _address_adapter.validate_python(value)
    except pydantic.ValidationError as e:
        _, message = _first_error(e)
        raise ValidationError(message) from e


def valid_levels_entries(maker: str, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Keep the level entries of one maker that pass validation.

    An invalid entry is dropped with a warning; the rest of the maker's
    pairs stay usable.
    """
    valid = []
    for index, entry in enumerate(entries or []):
        try:
            parsed = validate_and_cast(entry, LevelsEntrySchema)
        except ValidationError as e:
            logger.warning(f"Dropping price levels of {maker}[{index}]: {e}")
            continue
        valid.append(parsed.model_dump(by_alias=True))
    return valid
