"""
Numeric coercion helpers shared by the pricing engines.

Every figure that reaches an engine goes through ``to_number``; bad input
collapses to zero instead of raising so totals can be previewed on every
keystroke.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator


def to_number(value: Any) -> float:
    """Numeric-or-zero: parse ``value`` as a float, falling back to 0.0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_money(value: Any, places: int = 2) -> float:
    """Round half-up to ``places`` decimals."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(to_number(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    # Normalise -0.0
    return float(rounded) + 0.0


# Model field type that never fails validation on bad numbers
Numeric = Annotated[float, BeforeValidator(to_number)]


def to_optional_number(value: Any) -> float | None:
    """Like ``to_number`` but keeps "not provided" (None / blank) as None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_number(value)


OptionalNumeric = Annotated[float | None, BeforeValidator(to_optional_number)]


_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


def to_optional_flag(value: Any) -> bool | None:
    """Parse a boolean-ish value; anything unrecognised means "not chosen"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return None if math.isnan(value) else bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def to_flag(value: Any) -> bool:
    return bool(to_optional_flag(value))


Flag = Annotated[bool, BeforeValidator(to_flag)]
OptionalFlag = Annotated[bool | None, BeforeValidator(to_optional_flag)]
