from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.catalog.models import Product
from apps.discounts.models import Discount
from apps.shipping.models import ShippingCountry
from tests.factories import cart_line


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return get_user_model().objects.create_user(
        username='backoffice', email='admin@lumiere.example', password='secret-pass', is_staff=True
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def kuwait(db):
    return ShippingCountry.objects.create(
        name='Kuwait',
        code='KW',
        shipping_rate=Decimal('2'),
        free_threshold=Decimal('50'),
        enable_free_threshold=True,
        is_default=True,
    )


@pytest.fixture
def make_discount(db):
    def _make(code='SAVE10', discount_type=Discount.TYPE_PERCENTAGE, value='10', **extra):
        return Discount.objects.create(
            code=code, discount_type=discount_type, value=Decimal(value), **extra
        )
    return _make


@pytest.fixture
def product(db):
    return Product.objects.create(
        name='Midnight Silk Slip',
        price=Decimal('45.00'),
        description='Bias-cut silk slip dress.',
        category='Dresses',
        image_url='https://example.com/slip.jpg',
        featured=True,
        colors=['Black'],
        material='Silk',
    )


@pytest.fixture
def address():
    return {
        'name': 'Noura Al-Sabah',
        'line1': 'Block 3, Street 12',
        'city': 'Kuwait City',
        'state': 'Al Asimah',
        'postal_code': '13001',
        'country': 'KW',
        'phone': '+96550000000',
    }


@pytest.fixture
def checkout_payload(address):
    def _payload(items=None, **extra):
        payload = {
            'customer_name': 'Noura Al-Sabah',
            'customer_email': 'noura@example.com',
            'items': items if items is not None else [cart_line('45.00')],
            'shipping_address': address,
            'payment_method': 'cod',
        }
        payload.update(extra)
        return payload
    return _payload
