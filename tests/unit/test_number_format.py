import pytest
from decimal import Decimal

from comerciante.exceptions import ValidationError
from comerciante.utils.number_format import money_br, parse_money, parse_quantity


@pytest.mark.parametrize('value,expected', [
    (10, Decimal('10.00')),
    ('10.5', Decimal('10.50')),
    ('10,50', Decimal('10.50')),
    ('1.234,56', Decimal('1234.56')),
    ('R$ 7,00', Decimal('7.00')),
    (Decimal('0.005'), Decimal('0.00')),
])
def test_parse_money(value, expected):
    assert parse_money(value) == expected


@pytest.mark.parametrize('value', [None, '', 'dez', '-1', True, 'NaN'])
def test_parse_money_rejects(value):
    with pytest.raises(ValidationError):
        parse_money(value)


def test_parse_quantity():
    assert parse_quantity('12') == 12
    assert parse_quantity(3.0) == 3
    with pytest.raises(ValidationError):
        parse_quantity(0, minimum=1)
    with pytest.raises(ValidationError):
        parse_quantity(2.5)


def test_money_br():
    assert money_br(1500) == 'R$ 1.500,00'
    assert money_br(Decimal('40.5')) == 'R$ 40,50'
    assert money_br(None) == '-'


@pytest.mark.parametrize('value', ['1e30', 1e30, Decimal('100000000.00'), '1' * 40])
def test_parse_money_rejects_amounts_beyond_column_range(value):
    with pytest.raises(ValidationError):
        parse_money(value)


def test_parse_money_accepts_column_maximum():
    assert parse_money('99.999.999,99') == Decimal('99999999.99')


def test_parse_quantity_rejects_values_beyond_integer_range():
    assert parse_quantity(2 ** 63 - 1) == 2 ** 63 - 1
    with pytest.raises(ValidationError):
        parse_quantity(10 ** 20)
    with pytest.raises(ValidationError):
        parse_quantity('²')
