"""
Utility functions for the Lumière storefront
"""
import secrets
import string
import time
import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def storefront_setting(name: str) -> Any:
    """
    Read a key from the STOREFRONT settings dict.
    """
    return settings.STOREFRONT[name]


def to_money(value: Any) -> Decimal:
    """
    Coerce a number (or numeric string) to a Decimal rounded half-up to cents.
    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Not a monetary amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def clamp_money(amount: Decimal, upper: Decimal) -> Decimal:
    """
    Clamp an amount into [0, upper].
    """
    return max(ZERO, min(amount, upper))


def normalize_code(code: Optional[str]) -> str:
    """
    Normalize discount and country codes: trimmed, uppercase.
    """
    return (code or '').strip().upper()


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("Only non-negative numbers can be encoded")
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_order_number(prefix: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    """
    Build a human-readable order number: PREFIX-<base36 ms timestamp>-<4 random chars>.

    Not globally unique on its own; the unique index on Order.order_number is
    the backstop and callers retry on collision.
    """
    prefix = prefix or storefront_setting('ORDER_NUMBER_PREFIX')
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = ''.join(secrets.choice(BASE36_ALPHABET) for _ in range(4))
    return f"{prefix}-{to_base36(now_ms)}-{suffix}"
