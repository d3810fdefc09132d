"""Display formatting shared by the activity log and API responses

Amounts follow the Indian numbering convention: 1 Crore = 1,00,00,000 and
1 Lakh = 1,00,000. Amounts of a Lakh or more are abbreviated to two decimals.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional

CRORE = 10_000_000
LAKH = 100_000

PLACEHOLDER = "—"  # em-dash
RUPEE = "₹"

# Ties round away from zero, as en-IN browser formatting does
CENTS = Decimal("0.01")
GROUPED_FRACTION = Decimal("0.001")


def to_number(value: Any) -> Optional[Decimal]:
    """Coerce a stored or submitted amount to Decimal, or None when it isn't numeric"""
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        return None


def group_indian(value: Any) -> str:
    """Group digits the Indian way: 12345678 -> "1,23,45,678"

    Fractions are rounded half-up to three places and trailing zeros dropped.
    """
    number = to_number(value)
    if number is None:
        return str(value)

    sign = "-" if number < 0 else ""
    number = abs(number).quantize(GROUPED_FRACTION, rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{number:f}".partition(".")
    fraction = fraction.rstrip("0")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        whole = ",".join(pairs + [tail])

    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def _abbreviate(number: Decimal, unit: int) -> Decimal:
    return (number / unit).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_price(value: Any) -> str:
    """Abbreviate an INR amount: "1.20 Cr", "2.50 L", "45,000"; zero or empty -> em-dash"""
    number = to_number(value)
    if not number:
        return PLACEHOLDER
    if number >= CRORE:
        return f"{_abbreviate(number, CRORE)} Cr"
    if number >= LAKH:
        return f"{_abbreviate(number, LAKH)} L"
    return group_indian(number)


def as_text(value: Any) -> str:
    """Canonical string form used to compare old and new field values

    Mirrors loose string coercion: 5, 5.0 and "5" all become "5"; None becomes "".
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, Decimal):
        return str(int(value)) if value == value.to_integral_value() else str(value.normalize())
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)
