"""Number parsing and formatting utilities for Brazilian formats."""
import re
from decimal import Decimal, InvalidOperation
from typing import Union

from comerciante.exceptions import ValidationError

CENTS = Decimal('0.01')

# Largest values the Numeric(10, 2) money columns and SQLite INTEGER hold
MAX_MONEY = Decimal('99999999.99')
MAX_INTEGER = 2 ** 63 - 1

BR_GROUPED_PATTERN = re.compile(r"^\d{1,3}(?:\.\d{3})+(?:,\d+)?$")


def parse_money(value: Union[int, float, Decimal, str, None], field: str = 'valor') -> Decimal:
    """
    Parse a monetary amount to a non-negative Decimal with 2 places.

    Accepts numbers and strings in either format: ``10.5``, ``10,50`` or the
    grouped Brazilian ``1.234,56``.

    Raises:
        ValidationError: if the value is empty, not numeric or negative.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f'{field} é obrigatório')

    if isinstance(value, str):
        cleaned = value.strip().replace('R$', '').strip()
        if not cleaned:
            raise ValidationError(f'{field} é obrigatório')
        if BR_GROUPED_PATTERN.match(cleaned):
            cleaned = cleaned.replace('.', '')
        value = cleaned.replace(',', '.')

    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValidationError(f'{field} deve ser um número válido')
        amount = amount.quantize(CENTS)
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{field} deve ser um número válido')

    if amount < 0:
        raise ValidationError(f'{field} não pode ser negativo')
    if amount > MAX_MONEY:
        raise ValidationError(f'{field} não pode ser maior que {MAX_MONEY}')

    return amount


def parse_quantity(value: Union[int, str, None], field: str = 'quantidade', minimum: int = 0) -> int:
    """
    Parse a whole-unit quantity.

    Raises:
        ValidationError: if the value is not an integer or is below ``minimum``.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f'{field} é obrigatório')

    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'{field} deve ser um número inteiro')
        value = int(value)

    try:
        qty = int(str(value).strip())
    except ValueError:
        raise ValidationError(f'{field} deve ser um número inteiro')

    if qty < minimum:
        if minimum == 1:
            raise ValidationError(f'{field} deve ser maior que zero')
        raise ValidationError(f'{field} deve ser maior ou igual a {minimum}')
    if qty > MAX_INTEGER:
        raise ValidationError(f'{field} é grande demais')

    return qty


def money_br(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount as Brazilian currency.

    Examples:
        money_br(1500) -> "R$ 1.500,00"
        money_br(40.5) -> "R$ 40,50"
        money_br(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value)).quantize(CENTS)
    except (InvalidOperation, ValueError):
        return "-"

    # Swap separators: 1,500.00 -> 1.500,00
    formatted = f"{num:,.2f}".replace(',', '_').replace('.', ',').replace('_', '.')
    return f"R$ {formatted}"
