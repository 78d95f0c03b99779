"""
Parsing and formatting of money amounts entered at the till.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWO_PLACES = Decimal("0.01")


class InvalidAmount(ValueError):
    pass


def parse_amount(value):
    """
    Parse user input into a Decimal rounded to two places.

    Accepts numbers and numeric strings with optional thousands separators
    (``"5,000.50"``). Raises InvalidAmount for blank, non-numeric, NaN and
    infinite input. Sign is not checked here.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount("Amount is required")

    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            raise InvalidAmount("Amount is required")
    else:
        text = str(value)

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise InvalidAmount(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise InvalidAmount(f"Invalid amount: {value!r}")
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_decimal(value):
    """Decimal for an API amount field; ``None`` stays ``None``."""
    if value is None:
        return None
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(value):
    """``5000`` -> ``"5,000.00"``"""
    amount = to_decimal(value if value is not None else 0)
    return f"{amount:,.2f}"


def format_currency(value, currency_code="EGP"):
    """``5000`` -> ``"EGP 5,000.00"``"""
    return f"{currency_code} {format_amount(value)}"
