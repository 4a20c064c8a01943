"""
Currency formatting for peso amounts.

    format_currency(1234567)               -> "₱ 1,234,567"
    format_currency(1234567, shorten=True) -> "₱ 1.2M"
    format_currency(-500)                  -> "(₱ 500)"
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Amount = Union[int, float, Decimal]

CURRENCY_SYMBOL = "₱"

# Largest scale first
_SCALES = (
    (Decimal(1_000_000_000), "B"),
    (Decimal(1_000_000), "M"),
    (Decimal(1_000), "K"),
)

_ONE_PLACE = Decimal("0.1")
_NO_PLACES = Decimal("1")


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # str() keeps floats like 0.1 from dragging in binary noise
    return Decimal(str(amount))


def _group(value: Decimal, places: Decimal) -> str:
    """Round half-up and insert comma separators; a trailing '.0' is dropped."""
    rounded = value.quantize(places, rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return f"{int(rounded):,}"
    return f"{rounded:,f}"


def format_currency(amount: Amount, shorten: bool = False) -> str:
    """
    Render an amount as a peso string.

    Args:
        amount: Any finite number. Negatives are wrapped in parentheses.
        shorten: Abbreviate amounts of 1,000 and above with K/M/B.

    Returns:
        The formatted string, e.g. "₱ 2.5B" or "₱ 12,000".
    """
    value = _to_decimal(amount)

    if shorten:
        for scale, suffix in _SCALES:
            if value >= scale:
                return f"{CURRENCY_SYMBOL} {_group(value / scale, _ONE_PLACE)}{suffix}"

    text = _group(abs(value), _NO_PLACES)
    if value < 0 and text != "0":
        return f"({CURRENCY_SYMBOL} {text})"
    return f"{CURRENCY_SYMBOL} {text}"
