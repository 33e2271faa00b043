from decimal import Decimal

import pytest

from apps.core.exceptions import NoShippingConfigured
from apps.shipping.models import ShippingCountry
from apps.shipping.services import (
    get_default_country,
    initialize_default_countries,
    resolve_shipping,
    set_default_country,
)


def make_country(code, name, rate='5', threshold='100', **extra):
    return ShippingCountry.objects.create(
        code=code, name=name, shipping_rate=Decimal(rate), free_threshold=Decimal(threshold), **extra
    )


@pytest.mark.django_db
class TestResolveShipping:

    def test_free_threshold_boundary(self):
        make_country('KW', 'Kuwait', rate='3', threshold='50', enable_free_threshold=True)
        assert resolve_shipping('KW', '49').fee == Decimal('3.00')
        quote = resolve_shipping('KW', '50')
        assert quote.fee == Decimal('0')
        assert quote.free_shipping is True

    def test_threshold_disabled_always_charges(self):
        make_country('KW', 'Kuwait', rate='3', threshold='50', enable_free_threshold=False)
        assert resolve_shipping('KW', '500').fee == Decimal('3.00')

    def test_lookup_by_lowercase_code_or_name(self, kuwait):
        make_country('SA', 'Saudi Arabia')
        assert resolve_shipping('sa', '10').country_code == 'SA'
        assert resolve_shipping('saudi arabia', '10').country_code == 'SA'

    def test_unknown_country_falls_back_to_default(self, kuwait):
        make_country('SA', 'Saudi Arabia')
        quote = resolve_shipping('FR', '10')
        assert quote.country_code == 'KW'
        assert quote.fee == Decimal('2.00')
        assert quote.fallback is True

    def test_inactive_country_falls_back_to_default(self, kuwait):
        make_country('SA', 'Saudi Arabia', is_active=False)
        assert resolve_shipping('SA', '10').country_code == 'KW'

    def test_falls_back_to_any_active_row_without_default(self):
        make_country('BH', 'Bahrain', rate='4')
        quote = resolve_shipping('FR', '10')
        assert quote.country_code == 'BH'
        assert quote.fee == Decimal('4.00')

    def test_no_active_country(self):
        make_country('BH', 'Bahrain', is_active=False)
        with pytest.raises(NoShippingConfigured):
            resolve_shipping('BH', '10')

    def test_admin_changes_apply_to_next_call(self, kuwait):
        assert resolve_shipping('KW', '10').fee == Decimal('2.00')
        ShippingCountry.objects.filter(pk=kuwait.pk).update(shipping_rate=Decimal('3.5'))
        assert resolve_shipping('KW', '10').fee == Decimal('3.50')


@pytest.mark.django_db
class TestDefaultCountry:

    def test_swap_keeps_a_single_default(self, kuwait):
        saudi = make_country('SA', 'Saudi Arabia')
        set_default_country(saudi)

        assert ShippingCountry.objects.filter(is_default=True).count() == 1
        assert get_default_country().code == 'SA'
        kuwait.refresh_from_db()
        assert kuwait.is_default is False

    def test_initialize_seeds_kuwait_once(self):
        initialize_default_countries()
        initialize_default_countries()

        assert ShippingCountry.objects.count() == 1
        country = ShippingCountry.objects.get()
        assert country.code == 'KW'
        assert country.is_default is True
        assert country.shipping_rate == Decimal('2')
        assert country.free_threshold == Decimal('50')

    def test_code_stored_uppercase(self):
        assert make_country('qa', 'Qatar').code == 'QA'
