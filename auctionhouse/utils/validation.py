"""
Input Validation - Sanitization of caller-supplied values.

Every external input reaching the engine is checked here first:
- Identities are opaque, non-empty tokens of bounded length
- Amounts and durations are integral units within bounds
- Display strings are bounded in length
- Page requests are non-negative
"""

from typing import Any, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_IDENTITY_LENGTH = 128
MAX_STRING_LENGTH = 1024

MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MAX_DURATION = 2**32 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass, but True is not an amount
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a value amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_duration(duration: Any) -> Tuple[bool, str]:
    """Validate a bidding duration in seconds (must be positive)."""
    return validate_integer(duration, "bidding_duration", 1, MAX_DURATION)


def validate_string(
    value: Any,
    name: str,
    max_length: int = MAX_STRING_LENGTH,
) -> Tuple[bool, str]:
    """
    Validate string input.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    return True, ""


def validate_identity(identity: Any, name: str = "identity") -> Tuple[bool, str]:
    """Validate an opaque caller identity."""
    valid, err = validate_string(identity, name, MAX_IDENTITY_LENGTH)
    if not valid:
        return False, err

    if not identity.strip():
        return False, f"{name} must not be empty"

    return True, ""


def validate_page(offset: Any, limit: Any) -> Tuple[bool, str]:
    """Validate a pagination request."""
    valid, err = validate_integer(offset, "offset", 0, MAX_DURATION)
    if not valid:
        return False, err
    return validate_integer(limit, "limit", 0, MAX_DURATION)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_amount",
    "validate_duration",
    "validate_string",
    "validate_identity",
    "validate_page",
    "MAX_IDENTITY_LENGTH",
    "MAX_STRING_LENGTH",
    "MAX_AMOUNT",
]
