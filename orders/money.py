from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Round to currency precision (half up, like a till)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def fmt_money(value) -> str:
    return str(to_money(value))


# Largest values the DecimalField columns can hold (12 and 14 digits, 2 decimals).
MAX_UNIT_PRICE = Decimal("9999999999.99")
MAX_AMOUNT = Decimal("999999999999.99")
