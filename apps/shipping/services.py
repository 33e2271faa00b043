"""
Shipping Rate Resolver

Looks up the destination's ShippingCountry row on every call (admin edits
apply to the next checkout) and returns the fee for a subtotal.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Q

from apps.core.exceptions import NoShippingConfigured
from apps.core.utils import ZERO, normalize_code, to_money
from .models import ShippingCountry

logger = logging.getLogger(__name__)


@dataclass
class ShippingQuote:
    """Fee for one destination and subtotal."""
    country_code: str
    country_name: str
    subtotal: Decimal
    fee: Decimal
    free_shipping: bool
    fallback: bool = False

    def to_dict(self) -> dict:
        return {
            "country_code": self.country_code,
            "country_name": self.country_name,
            "subtotal": self.subtotal,
            "fee": self.fee,
            "free_shipping": self.free_shipping,
            "fallback": self.fallback,
        }


def get_default_country() -> Optional[ShippingCountry]:
    """
    The active default row, or any active row when no default is set.
    """
    country = ShippingCountry.objects.filter(is_default=True, is_active=True).first()
    if country is None:
        country = ShippingCountry.objects.filter(is_active=True).order_by('name').first()
    return country


def find_country(identifier: Optional[str]) -> Optional[ShippingCountry]:
    """
    Active country matching a code or a name, case-insensitively.
    """
    if not identifier or not identifier.strip():
        return None
    identifier = identifier.strip()
    return (
        ShippingCountry.objects
        .filter(is_active=True)
        .filter(Q(code=normalize_code(identifier)) | Q(name__iexact=identifier))
        .first()
    )


def shipping_fee(country: ShippingCountry, subtotal: Decimal) -> Decimal:
    if country.enable_free_threshold and subtotal >= country.free_threshold:
        return ZERO
    return to_money(country.shipping_rate)


def resolve_shipping(country: Optional[str], subtotal) -> ShippingQuote:
    """
    Shipping fee for a destination (code or name) and subtotal.

    Unknown or inactive destinations fall back to the default country;
    raises NoShippingConfigured when no active country exists at all.
    """
    subtotal = to_money(subtotal)
    row = find_country(country)
    fallback = False

    if row is None:
        row = get_default_country()
        fallback = True
        if row is None:
            logger.error("Shipping requested but no active shipping country is configured")
            raise NoShippingConfigured()
        logger.info(f"Shipping destination {country!r} not configured, using {row.code}")

    fee = shipping_fee(row, subtotal)
    return ShippingQuote(
        country_code=row.code,
        country_name=row.name,
        subtotal=subtotal,
        fee=fee,
        free_shipping=fee == ZERO,
        fallback=fallback,
    )


def set_default_country(country: ShippingCountry) -> ShippingCountry:
    """
    Make this row the single default: clear every other default and set
    this one in the same transaction.
    """
    with transaction.atomic():
        ShippingCountry.objects.filter(is_default=True).exclude(pk=country.pk).update(is_default=False)
        if not country.is_default:
            country.is_default = True
            ShippingCountry.objects.filter(pk=country.pk).update(is_default=True)

    logger.info(f"Default shipping country set to {country.code}")
    return country


def initialize_default_countries() -> None:
    """
    Seed Kuwait as the default destination when no country exists yet.
    """
    if ShippingCountry.objects.exists():
        return
    ShippingCountry.objects.create(
        name='Kuwait',
        code='KW',
        shipping_rate=Decimal('2'),
        free_threshold=Decimal('50'),
        enable_free_threshold=True,
        is_active=True,
        is_default=True,
    )
    logger.info("Seeded default shipping country KW")
