# app/utils/decimal_utils.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")
THREE_PLACES = Decimal("0.001")


def to_decimal(value, field: str = "value", error_cls=ValueError) -> Decimal:
    """
    Convert ints, floats and strings to Decimal via their string form, so 2.5
    stays exactly 2.5 instead of picking up binary float noise.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise error_cls(f"{field} must be a number")
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise error_cls(f"{field} must be a number")
    if not result.is_finite():
        raise error_cls(f"{field} must be a finite number")
    return result


def round_money(value: Decimal) -> Decimal:
    # half away from zero, 2 places
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_weight(value: Decimal) -> Decimal:
    return value.quantize(THREE_PLACES, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
