import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

_NOT_PRICE_CHARS = re.compile(r"[^0-9.]")
_CENTS = Decimal("0.01")
_LEADING_INT = re.compile(r"[-+]?\d+")

# 32-bit INTEGER, the narrowest of the supported databases
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
# Numeric(12, 2)
PRICE_MAX = Decimal("9999999999.99")


def parse_price(raw: Optional[str]) -> Optional[Decimal]:
    """'₹ 1,299.50' -> Decimal('1299.50'); blank or garbage -> None."""
    if raw is None:
        return None
    cleaned = _NOT_PRICE_CHARS.sub("", str(raw))
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite() or value > PRICE_MAX:
        return None
    return value


def parse_int(raw: Optional[str]) -> Optional[int]:
    """
    Leading integer digits only: '1,200' -> 1200, '12.9' -> 12, '1e30' -> 1.
    Blank, garbage or values outside the INTEGER column range -> None.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw).strip().replace(",", ""))
    if not match:
        return None
    digits = match.group(0)
    if len(digits.lstrip("+-").lstrip("0")) > len(str(INT_MAX)):
        return None
    value = int(digits)
    if not INT_MIN <= value <= INT_MAX:
        return None
    return value


def to_int(value: Optional[str], fallback: int) -> int:
    """Lenient query-string integer: unparsable input gives ``fallback``."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return fallback


def money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_inr(value: Decimal) -> str:
    """
    Two decimals with Indian digit grouping: 1234567.5 -> '12,34,567.50'.
    """
    q = money(value)
    sign = "-" if q < 0 else ""
    whole, frac = f"{abs(q):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}{whole}.{frac}"
