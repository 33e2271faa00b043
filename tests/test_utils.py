from decimal import Decimal

import pytest

from apps.core.utils import clamp_money, generate_order_number, normalize_code, to_base36, to_money


@pytest.mark.parametrize('number, encoded', [
    (0, '0'),
    (35, 'Z'),
    (36, '10'),
    (1295, 'ZZ'),
])
def test_to_base36(number, encoded):
    assert to_base36(number) == encoded
    assert int(encoded, 36) == number


def test_to_base36_rejects_negative():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_order_number_layout():
    number = generate_order_number(prefix='LUM', now_ms=1700000000000)
    prefix, timestamp, suffix = number.split('-')
    assert prefix == 'LUM'
    assert int(timestamp, 36) == 1700000000000
    assert len(suffix) == 4
    assert suffix.isalnum() and suffix == suffix.upper()


def test_order_number_uses_configured_prefix(settings):
    settings.STOREFRONT = {**settings.STOREFRONT, 'ORDER_NUMBER_PREFIX': 'TST'}
    assert generate_order_number().startswith('TST-')


@pytest.mark.parametrize('value, expected', [
    ('4.5', Decimal('4.50')),
    (4.5, Decimal('4.50')),
    (0.1, Decimal('0.10')),
    ('2.995', Decimal('3.00')),
    (3, Decimal('3.00')),
])
def test_to_money(value, expected):
    assert to_money(value) == expected


def test_to_money_rejects_garbage():
    with pytest.raises(ValueError):
        to_money('abc')


def test_clamp_money():
    assert clamp_money(Decimal('-1'), Decimal('10')) == Decimal('0')
    assert clamp_money(Decimal('12'), Decimal('10')) == Decimal('10')
    assert clamp_money(Decimal('5'), Decimal('10')) == Decimal('5')


def test_normalize_code():
    assert normalize_code('  save10 ') == 'SAVE10'
    assert normalize_code(None) == ''
