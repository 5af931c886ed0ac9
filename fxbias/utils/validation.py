"""Input validation utilities."""
import math
from numbers import Real
from typing import Any

from fxbias.utils.errors import ValidationError


SCORE_RANGE = (-2, 2)
EVENT_MODIFIER_VALUES = (-1, 0, 1)


def is_number(value: Any) -> bool:
    """True for real numbers that are not bools or NaN."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(value)


def require_number(value: Any, what: str = "value") -> float:
    """Return value as float or raise ValidationError."""
    if not is_number(value):
        raise ValidationError(f"{what} must be a number, got: {value!r}")
    return float(value)


def require_integer(value: Any, what: str = "value") -> int:
    """Return an integral number as int; bools and fractions raise ValidationError."""
    number = require_number(value, what)
    if not number.is_integer():
        raise ValidationError(f"{what} must be an integer, got: {value!r}")
    return int(number)


def validate_currency_code(code: str) -> str:
    """Validate a 3-letter uppercase ISO currency code."""
    if not isinstance(code, str) or len(code) != 3 or not code.isalpha() or code != code.upper():
        raise ValidationError(
            f"Invalid currency code: {code!r}. Expect 3-letter uppercase ISO code."
        )
    return code


def validate_currency_pair(pair: str) -> tuple[str, str]:
    """
    Validate and parse currency pair.

    Args:
        pair: Currency pair string (e.g., "USD/JPY", "USD-JPY", "USDJPY")

    Returns:
        Tuple of (base_currency, quote_currency)

    Raises:
        ValidationError: If pair format is invalid
    """
    pair = pair.strip().upper()

    for sep in ['/', '-', '_']:
        if sep in pair:
            parts = pair.split(sep)
            if len(parts) == 2:
                base, quote = parts
                if len(base) == 3 and len(quote) == 3 and base.isalpha() and quote.isalpha():
                    return base, quote

    if len(pair) == 6 and pair.isalpha():
        return pair[:3], pair[3:]

    raise ValidationError(f"Invalid currency pair format: {pair}")


def validate_score(value: Any) -> int:
    """
    Validate an indicator score.

    Integral floats (e.g. 1.0 from a JSON payload) are accepted and
    narrowed to int.

    Raises:
        ValidationError: If the score is not an integer in [-2, 2]
    """
    number = require_number(value, "score")
    if not number.is_integer():
        raise ValidationError(f"score must be an integer, got: {value!r}")
    score = int(number)
    low, high = SCORE_RANGE
    if score < low or score > high:
        raise ValidationError(f"score must be in [{low}, {high}], got: {score}")
    return score


def validate_event_modifier(value: Any) -> int:
    """Validate an event modifier score; must be one of -1, 0, 1."""
    number = require_number(value, "event modifier")
    if not number.is_integer() or int(number) not in EVENT_MODIFIER_VALUES:
        raise ValidationError(
            f"Invalid event modifier: {value!r}. Must be one of {list(EVENT_MODIFIER_VALUES)}"
        )
    return int(number)
