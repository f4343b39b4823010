"""Shared type definitions for the pair API models."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from stablepool.safe_int import UINT128_MAX


def validate_uint128(value: Any) -> str:
    """Validate that a value is a valid uint128 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint128 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint128 range
    """
    # Accept int directly
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"Uint128 cannot be negative: {value}")
        if value > UINT128_MAX:
            raise ValueError(f"Uint128 overflow: {value} > 2^128-1")
        return str(value)

    if not isinstance(value, str):
        raise ValueError(f"Uint128 must be string or int, got {type(value).__name__}")

    try:
        int_value = int(value)
    except ValueError as err:
        raise ValueError(f"Uint128 must be a decimal integer string: '{value}'") from err

    if int_value < 0:
        raise ValueError(f"Uint128 cannot be negative: {value}")
    if int_value > UINT128_MAX:
        raise ValueError(f"Uint128 overflow: {value} > 2^128-1")

    return str(int_value)


def validate_rate(value: Any) -> str:
    """Validate a non-negative decimal rate given as string or number."""
    if isinstance(value, bool):
        raise ValueError("Rate must be a decimal string")
    try:
        rate = Decimal(str(value))
    except ArithmeticError as err:
        raise ValueError(f"Rate must be a decimal string: '{value}'") from err
    if not rate.is_finite() or rate < 0:
        raise ValueError(f"Rate must be a non-negative decimal: '{value}'")
    return str(rate)


# 128-bit unsigned integer as decimal string (validated)
Uint128 = Annotated[
    str,
    BeforeValidator(validate_uint128),
    Field(description="128-bit unsigned integer as decimal string"),
]

# Non-negative decimal as string, e.g. "0.005"
Rate = Annotated[
    str,
    BeforeValidator(validate_rate),
    Field(description="Non-negative decimal as string"),
]

# Account or contract address
Addr = Annotated[str, Field(min_length=1, description="Account or contract address")]
