"""
Discount Resolver

Validates a discount code against a cart subtotal and computes the amount
taken off. Two entry points:
- resolve_discount: read-only quote, used by the checkout page
- redeem_discount: the same checks on a locked row plus a conditional
  used_count increment; runs inside the caller's order transaction
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from apps.core.exceptions import (
    BusinessRuleViolation,
    DiscountBelowMinimum,
    DiscountExpired,
    DiscountInactive,
    DiscountNotFound,
    DiscountUsesExhausted,
    ValidationException,
)
from apps.core.utils import ZERO, clamp_money, normalize_code, storefront_setting, to_money
from .models import Discount

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')


@dataclass
class DiscountQuote:
    """Outcome of a successful discount check."""
    code: str
    discount_type: str
    value: Decimal
    subtotal: Decimal
    amount: Decimal

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "discount_type": self.discount_type,
            "value": self.value,
            "subtotal": self.subtotal,
            "discount_amount": self.amount,
        }


def compute_discount_amount(discount_type: str, value: Decimal, subtotal: Decimal) -> Decimal:
    """
    Percentage: subtotal * value / 100. Fixed: min(value, subtotal).
    Never negative, never more than the subtotal.
    """
    subtotal = to_money(subtotal)
    value = Decimal(value)
    if subtotal <= ZERO:
        return ZERO

    if discount_type == Discount.TYPE_PERCENTAGE:
        amount = subtotal * value / HUNDRED
    elif discount_type == Discount.TYPE_FIXED:
        amount = min(value, subtotal)
    else:
        raise ValueError(f"Unknown discount type: {discount_type}")

    return clamp_money(to_money(amount), subtotal)


def check_discount(discount: Discount, subtotal: Decimal, now: Optional[datetime] = None) -> None:
    """
    Raise the first rule the discount fails for this subtotal, if any.
    Order: inactive, expired, below minimum, uses exhausted.
    """
    now = now or timezone.now()

    if not discount.is_active:
        raise DiscountInactive(discount.code)
    if discount.expires_at is not None and discount.expires_at < now:
        raise DiscountExpired(discount.code)
    if subtotal < discount.min_order_amount:
        raise DiscountBelowMinimum(
            discount.code,
            discount.min_order_amount,
            storefront_setting('BASE_CURRENCY'),
        )
    if not discount.is_unlimited and discount.used_count >= discount.max_uses:
        raise DiscountUsesExhausted(discount.code)


def _normalized_or_raise(code: Optional[str]) -> str:
    normalized = normalize_code(code)
    if not normalized:
        raise ValidationException("Discount code is required", field="code")
    return normalized


def _quote(discount: Discount, subtotal: Decimal) -> DiscountQuote:
    return DiscountQuote(
        code=discount.code,
        discount_type=discount.discount_type,
        value=discount.value,
        subtotal=subtotal,
        amount=compute_discount_amount(discount.discount_type, discount.value, subtotal),
    )


def resolve_discount(code: Optional[str], subtotal, now: Optional[datetime] = None) -> DiscountQuote:
    """
    Validate a code against a subtotal without consuming a use.
    """
    normalized = _normalized_or_raise(code)
    subtotal = to_money(subtotal)

    discount = Discount.objects.filter(code=normalized).first()
    if discount is None:
        logger.warning(f"Discount lookup failed for code {normalized}")
        raise DiscountNotFound(normalized)

    try:
        check_discount(discount, subtotal, now)
    except BusinessRuleViolation as e:
        logger.warning(f"Discount {normalized} rejected: {e}")
        raise

    return _quote(discount, subtotal)


def redeem_discount(code: Optional[str], subtotal, now: Optional[datetime] = None) -> DiscountQuote:
    """
    Validate and consume one use of a code.

    Must run inside the transaction that writes the order: the row is locked,
    re-checked, and used_count is bumped with a conditional UPDATE so two
    checkouts can never push it past max_uses.
    """
    normalized = _normalized_or_raise(code)
    subtotal = to_money(subtotal)

    with transaction.atomic():
        discount = Discount.objects.select_for_update().filter(code=normalized).first()
        if discount is None:
            logger.warning(f"Discount redemption failed, unknown code {normalized}")
            raise DiscountNotFound(normalized)

        check_discount(discount, subtotal, now)

        updated = (
            Discount.objects
            .filter(pk=discount.pk, is_active=True)
            .filter(Q(max_uses=0) | Q(used_count__lt=F('max_uses')))
            .update(used_count=F('used_count') + 1)
        )
        if updated != 1:
            logger.warning(f"Discount {normalized} exhausted during redemption")
            raise DiscountUsesExhausted(normalized)

    logger.info(f"Discount {normalized} redeemed, used_count now {discount.used_count + 1}")
    return _quote(discount, subtotal)
