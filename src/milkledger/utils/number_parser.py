"""Number parsing and formatting utilities."""

import math
import re


def parse_number(number_str: str) -> float:
    """Parse a user-entered number (rate, amount) into a float.

    Handles various formats:
    - "123.45"
    - "₹123.45"
    - "1,234.56"

    Unlike readings fed to the rate calculators, rates and payment amounts
    must be valid numbers.

    Args:
        number_str: Number string

    Returns:
        Float value

    Raises:
        ValueError: If the string is empty or not a finite number
    """
    if not number_str or not number_str.strip():
        raise ValueError("Empty number")

    cleaned = re.sub(r"[₹$,\s]", "", number_str)
    try:
        value = float(cleaned)
    except ValueError:
        raise ValueError(f"Could not parse number '{number_str}'")
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"Could not parse number '{number_str}'")
    return value


def format_number(value: float) -> str:
    """Format a stored number for text output without a trailing ".0".

    Examples:
        >>> format_number(10.0)
        '10'
        >>> format_number(3.5)
        '3.5'
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
