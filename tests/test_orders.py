from decimal import Decimal

import pytest

from apps.core.exceptions import (
    DiscountUsesExhausted,
    EmptyCart,
    NoShippingConfigured,
    PersistenceException,
    ValidationException,
)
from apps.discounts.models import Discount
from apps.orders.models import Order
from apps.orders.services import place_order
from tests.factories import cart_line


def checkout(address, items, **extra):
    params = {
        'customer_name': 'Noura Al-Sabah',
        'customer_email': 'noura@example.com',
        'items': items,
        'shipping_address': address,
        'payment_method': 'cod',
    }
    params.update(extra)
    return place_order(**params)


@pytest.mark.django_db
class TestPlaceOrder:

    def test_discount_and_paid_shipping(self, kuwait, make_discount, address):
        discount = make_discount(code='SAVE10', value='10', min_order_amount=Decimal('0'))

        order = checkout(address, [cart_line('45')], discount_code='SAVE10')

        assert order.subtotal == Decimal('45.00')
        assert order.discount == Decimal('4.50')
        assert order.shipping == Decimal('2.00')
        assert order.tax == Decimal('0.00')
        assert order.total == Decimal('42.50')
        assert order.discount_code == 'SAVE10'
        discount.refresh_from_db()
        assert discount.used_count == 1

    def test_free_shipping_over_threshold(self, kuwait, address):
        order = checkout(address, [cart_line('30', quantity=2)])

        assert order.subtotal == Decimal('60.00')
        assert order.shipping == Decimal('0')
        assert order.discount == Decimal('0')
        assert order.total == Decimal('60.00')

    def test_total_invariant_holds_for_persisted_order(self, kuwait, make_discount, address):
        make_discount(code='FIVE', discount_type=Discount.TYPE_FIXED, value='5')
        order = checkout(
            address,
            [cart_line('12.25', quantity=3), cart_line('7.10', name='Silk Scarf')],
            discount_code='five',
        )
        stored = Order.objects.get(pk=order.pk)
        assert stored.subtotal == Decimal('43.85')
        assert stored.total == stored.subtotal - stored.discount + stored.shipping + stored.tax
        assert stored.total == Decimal('40.85')

    def test_price_snapshot_is_used(self, kuwait, product, address):
        order = checkout(address, [cart_line('40', product_id=product.pk)])
        product.price = Decimal('99')
        product.save()

        order.refresh_from_db()
        assert order.subtotal == Decimal('40.00')
        assert order.items.get().price == Decimal('40.00')

    def test_items_are_frozen_in_order(self, kuwait, address):
        order = checkout(address, [cart_line('10', quantity=2, name='A'), cart_line('5', name='B')])
        names = [item.name for item in order.items.all()]
        assert names == ['A', 'B']
        assert order.items.first().quantity == 2

    @pytest.mark.parametrize('method', ['card', 'cod', 'whatsapp'])
    def test_every_order_starts_pending_and_unpaid(self, kuwait, address, method):
        order = checkout(address, [cart_line('10')], payment_method=method)
        assert order.status == Order.STATUS_PENDING
        assert order.payment_status == Order.PAYMENT_UNPAID
        assert order.payment_method == method

    def test_order_number_format(self, kuwait, address):
        order = checkout(address, [cart_line('10')])
        prefix, timestamp, suffix = order.order_number.split('-')
        assert prefix == 'LUM'
        assert timestamp.isalnum() and timestamp == timestamp.upper()
        assert len(suffix) == 4

    def test_empty_cart(self, kuwait, address):
        with pytest.raises(EmptyCart):
            checkout(address, [])
        assert Order.objects.count() == 0

    @pytest.mark.parametrize('field', ['name', 'line1', 'city', 'state', 'postal_code', 'country'])
    def test_blank_address_field(self, kuwait, address, field):
        address[field] = '  '
        with pytest.raises(ValidationException) as exc_info:
            checkout(address, [cart_line('10')])
        assert exc_info.value.field == f'shipping_address.{field}'

    def test_blank_contact(self, kuwait, address):
        with pytest.raises(ValidationException):
            checkout(address, [cart_line('10')], customer_email='')

    def test_non_positive_quantity(self, kuwait, address):
        with pytest.raises(ValidationException):
            checkout(address, [cart_line('10', quantity=0)])

    def test_unknown_payment_method(self, kuwait, address):
        with pytest.raises(ValidationException):
            checkout(address, [cart_line('10')], payment_method='paypal')

    def test_no_shipping_configured(self, address):
        with pytest.raises(NoShippingConfigured):
            checkout(address, [cart_line('10')])

    def test_rejected_discount_creates_no_order(self, kuwait, make_discount, address):
        make_discount(max_uses=1, used_count=1)
        with pytest.raises(DiscountUsesExhausted):
            checkout(address, [cart_line('45')], discount_code='SAVE10')
        assert Order.objects.count() == 0


@pytest.mark.django_db
class TestOrderNumberCollisions:

    def test_retries_after_collision(self, kuwait, address):
        checkout(address, [cart_line('10')], number_generator=lambda: 'LUM-TAKEN-0001')
        candidates = iter(['LUM-TAKEN-0001', 'LUM-TAKEN-0001', 'LUM-FRESH-0002'])

        order = checkout(address, [cart_line('10')], number_generator=lambda: next(candidates))

        assert order.order_number == 'LUM-FRESH-0002'
        assert Order.objects.count() == 2

    def test_gives_up_and_rolls_back_discount(self, kuwait, make_discount, address, settings):
        settings.STOREFRONT = {**settings.STOREFRONT, 'ORDER_NUMBER_MAX_ATTEMPTS': 3}
        discount = make_discount(max_uses=5)
        checkout(address, [cart_line('10')], number_generator=lambda: 'LUM-TAKEN-0001')
        discount.refresh_from_db()
        assert discount.used_count == 0

        with pytest.raises(PersistenceException):
            checkout(
                address,
                [cart_line('45')],
                discount_code='SAVE10',
                number_generator=lambda: 'LUM-TAKEN-0001',
            )

        discount.refresh_from_db()
        assert discount.used_count == 0
        assert Order.objects.count() == 1

