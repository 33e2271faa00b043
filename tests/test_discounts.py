from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.exceptions import (
    DiscountBelowMinimum,
    DiscountExpired,
    DiscountInactive,
    DiscountNotFound,
    DiscountUsesExhausted,
    ValidationException,
)
from apps.discounts.models import Discount
from apps.discounts.services import compute_discount_amount, redeem_discount, resolve_discount


class TestComputeDiscountAmount:

    @pytest.mark.parametrize('subtotal, value, expected', [
        ('45', '10', '4.50'),
        ('100', '0', '0.00'),
        ('100', '100', '100.00'),
        ('19.99', '15', '3.00'),
        ('0', '50', '0.00'),
    ])
    def test_percentage_is_share_of_subtotal(self, subtotal, value, expected):
        amount = compute_discount_amount(Discount.TYPE_PERCENTAGE, Decimal(value), Decimal(subtotal))
        assert amount == Decimal(expected)
        assert amount <= Decimal(subtotal)

    @pytest.mark.parametrize('subtotal, value, expected', [
        ('45', '5', '5.00'),
        ('3', '5', '3.00'),
        ('10', '0', '0.00'),
    ])
    def test_fixed_is_capped_by_subtotal(self, subtotal, value, expected):
        amount = compute_discount_amount(Discount.TYPE_FIXED, Decimal(value), Decimal(subtotal))
        assert amount == Decimal(expected)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            compute_discount_amount('bogo', Decimal('1'), Decimal('10'))


@pytest.mark.django_db
class TestResolveDiscount:

    def test_code_is_normalized(self, make_discount):
        make_discount(code='SAVE10')
        quote = resolve_discount('  save10 ', '45')
        assert quote.code == 'SAVE10'
        assert quote.amount == Decimal('4.50')

    def test_quote_does_not_consume_a_use(self, make_discount):
        discount = make_discount(max_uses=1)
        resolve_discount('SAVE10', '45')
        resolve_discount('SAVE10', '45')
        discount.refresh_from_db()
        assert discount.used_count == 0

    def test_blank_code(self, make_discount):
        with pytest.raises(ValidationException):
            resolve_discount('   ', '45')

    def test_unknown_code(self, db):
        with pytest.raises(DiscountNotFound):
            resolve_discount('NOPE', '45')

    def test_inactive(self, make_discount):
        make_discount(is_active=False)
        with pytest.raises(DiscountInactive):
            resolve_discount('SAVE10', '45')

    def test_expired_even_when_active(self, make_discount):
        make_discount(is_active=True, expires_at=timezone.now() - timedelta(minutes=1))
        with pytest.raises(DiscountExpired):
            resolve_discount('SAVE10', '45')

    def test_expiry_evaluated_against_given_instant(self, make_discount):
        expires_at = timezone.now() + timedelta(days=1)
        make_discount(expires_at=expires_at)
        assert resolve_discount('SAVE10', '45').amount == Decimal('4.50')
        with pytest.raises(DiscountExpired):
            resolve_discount('SAVE10', '45', now=expires_at + timedelta(seconds=1))

    def test_below_minimum(self, make_discount):
        make_discount(min_order_amount=Decimal('50'))
        with pytest.raises(DiscountBelowMinimum) as exc_info:
            resolve_discount('SAVE10', '49.99')
        assert '50' in exc_info.value.message
        assert resolve_discount('SAVE10', '50').amount == Decimal('5.00')

    def test_uses_exhausted_regardless_of_other_fields(self, make_discount):
        make_discount(max_uses=3, used_count=3, min_order_amount=Decimal('0'))
        with pytest.raises(DiscountUsesExhausted):
            resolve_discount('SAVE10', '1000')

    def test_unlimited_uses(self, make_discount):
        make_discount(max_uses=0, used_count=500)
        assert resolve_discount('SAVE10', '20').amount == Decimal('2.00')


@pytest.mark.django_db
class TestRedeemDiscount:

    def test_increments_used_count_once(self, make_discount):
        discount = make_discount(max_uses=2)
        quote = redeem_discount('save10', '45')
        discount.refresh_from_db()
        assert quote.amount == Decimal('4.50')
        assert discount.used_count == 1

    def test_stops_at_max_uses(self, make_discount):
        discount = make_discount(max_uses=2)
        redeem_discount('SAVE10', '45')
        redeem_discount('SAVE10', '45')
        with pytest.raises(DiscountUsesExhausted):
            redeem_discount('SAVE10', '45')
        discount.refresh_from_db()
        assert discount.used_count == 2

    def test_rejection_leaves_count_untouched(self, make_discount):
        discount = make_discount(min_order_amount=Decimal('100'))
        with pytest.raises(DiscountBelowMinimum):
            redeem_discount('SAVE10', '45')
        discount.refresh_from_db()
        assert discount.used_count == 0


@pytest.mark.django_db
class TestDiscountModel:

    def test_percentage_above_hundred_rejected_by_database(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Discount.objects.create(code='HALFOFF', discount_type=Discount.TYPE_PERCENTAGE, value=Decimal('150'))

    def test_fixed_amount_may_exceed_hundred(self):
        discount = Discount.objects.create(code='BIGSPEND', discount_type=Discount.TYPE_FIXED, value=Decimal('150'))
        assert discount.value == Decimal('150')

    def test_used_count_cannot_pass_max_uses(self, make_discount):
        discount = make_discount(max_uses=5, used_count=3)
        with pytest.raises(IntegrityError), transaction.atomic():
            Discount.objects.filter(pk=discount.pk).update(max_uses=2)

    def test_zero_max_uses_is_unlimited(self, make_discount):
        assert make_discount(max_uses=0).is_unlimited is True
        assert make_discount(code='ONCE', max_uses=1).is_unlimited is False
