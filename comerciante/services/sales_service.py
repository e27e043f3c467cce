"""
Sales service with transactional logic.
Records a sale header, its items and the matching stock decrements as one unit.
"""
import enum
import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from comerciante.database import run_transaction
from comerciante.exceptions import BusinessLogicError, ComercianteError, ValidationError
from comerciante.models import Sale, SaleItem, normalize_payment_method
from comerciante.services.product_service import decrement_stock
from comerciante.services.sale_number_service import format_sale_number, next_sale_number
from comerciante.utils.number_format import CENTS, parse_money, parse_quantity

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = 'Cliente não identificado'

# ASCII digits only; str.isdigit() also accepts superscripts
SALE_NUMBER_PATTERN = re.compile(r'\d{1,18}', re.ASCII)

# Sales are recorded one at a time per process
_sale_lock = threading.Lock()


class SaleState(str, enum.Enum):
    """Lifecycle of a sale submission."""
    DRAFT = 'draft'
    SUBMITTING = 'submitting'
    COMMITTED = 'committed'
    FAILED = 'failed'


_TRANSITIONS = {
    SaleState.DRAFT: {SaleState.SUBMITTING},
    SaleState.SUBMITTING: {SaleState.COMMITTED, SaleState.FAILED},
    SaleState.COMMITTED: set(),
    SaleState.FAILED: set(),
}


@dataclass
class SaleLine:
    product_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SaleLine':
        """
        Build a validated line from ``{productId, quantity, unitPrice, lineTotal}``.

        ``lineTotal`` is optional; when present it must equal quantity x unitPrice.
        """
        if not isinstance(data, dict):
            raise ValidationError('Item de venda inválido')

        product_id = parse_quantity(data.get('productId'), 'productId', minimum=1)
        quantity = parse_quantity(data.get('quantity'), 'Quantidade', minimum=1)
        unit_price = parse_money(data.get('unitPrice'), 'Preço unitário')
        expected = (unit_price * quantity).quantize(CENTS)

        line_total = data.get('lineTotal')
        if line_total in (None, ''):
            line_total = expected
        else:
            line_total = parse_money(line_total, 'Total do item')
            if line_total != expected:
                raise ValidationError(
                    f'Total do item do produto #{product_id} deve ser {expected} '
                    f'({quantity} x {unit_price}), recebido {line_total}'
                )

        return cls(product_id, quantity, unit_price, line_total)


@dataclass
class SaleHeader:
    payment_method: str
    number: Optional[str] = None
    client: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_client: str = DEFAULT_CLIENT_NAME) -> 'SaleHeader':
        number = data.get('number')
        if number not in (None, ''):
            number = str(number).strip()
            if not SALE_NUMBER_PATTERN.fullmatch(number):
                raise ValidationError(f'Número de venda inválido: {number!r}')
            number = format_sale_number(int(number))
        else:
            number = None

        return cls(
            payment_method=normalize_payment_method(data.get('paymentMethod')),
            number=number,
            client=str(data.get('client') or '').strip() or default_client,
            phone=str(data.get('phone') or '').strip(),
        )


@dataclass
class SaleSummary:
    id: int
    number: str
    date: str
    payment_method: str
    total: Decimal

    def to_dict(self):
        return {
            'id': self.id,
            'number': self.number,
            'date': self.date,
            'paymentMethod': self.payment_method,
            'total': self.total,
        }


@dataclass
class SaleSubmission:
    """
    One sale on its way from draft to a terminal state.

    Lines accumulate while DRAFT. submit() moves to SUBMITTING and runs every
    write in a single transaction; the sale reaches COMMITTED only once each
    line has had both its item insert and its stock decrement acknowledged.
    Any failure leaves it FAILED with nothing persisted.
    """
    header: SaleHeader
    lines: List[SaleLine] = field(default_factory=list)
    state: SaleState = SaleState.DRAFT
    completed_lines: int = 0
    summary: Optional[SaleSummary] = None
    error: Optional[Exception] = None

    @property
    def total(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal('0.00'))

    @property
    def is_complete(self) -> bool:
        return self.completed_lines == len(self.lines)

    def add_line(self, line: SaleLine) -> None:
        if self.state is not SaleState.DRAFT:
            raise BusinessLogicError(f'Não é possível alterar uma venda em estado {self.state.value}')
        self.lines.append(line)

    def transition(self, new_state: SaleState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise BusinessLogicError(
                f'Transição inválida: {self.state.value} -> {new_state.value}'
            )
        self.state = new_state

    def _statements(self, sale_date: str, allow_negative_stock: bool) -> list:
        header = self.header
        total = self.total

        def insert_header(session, results):
            number = header.number or next_sale_number(session)
            sale = Sale(
                number=number,
                client=header.client,
                phone=header.phone,
                total=total,
                date=sale_date,
                payment_method=header.payment_method,
            )
            session.add(sale)
            session.flush()
            return {'id': sale.id, 'number': number}

        def insert_item(line):
            def statement(session, results):
                item = SaleItem(
                    sale_id=results[0]['id'],
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.unit_price,
                    total=line.line_total,
                )
                session.add(item)
                session.flush()
                return item.id
            return statement

        def decrement(line):
            def statement(session, results):
                rows = decrement_stock(
                    session, line.product_id, line.quantity,
                    allow_negative=allow_negative_stock
                )
                self.completed_lines += 1
                return rows
            return statement

        def all_lines_done(session, results):
            if not self.is_complete:
                raise BusinessLogicError(
                    f'Venda incompleta: {self.completed_lines} de {len(self.lines)} itens processados'
                )
            return self.completed_lines

        statements = [insert_header]
        for line in self.lines:
            statements.append(insert_item(line))
            statements.append(decrement(line))
        statements.append(all_lines_done)
        return statements

    def submit(self, session, allow_negative_stock: bool = False, today: Optional[date] = None) -> SaleSummary:
        self.transition(SaleState.SUBMITTING)
        self.completed_lines = 0
        sale_date = (today or date.today()).isoformat()

        logger.info(
            f"Creating sale #{self.header.number or '(next)'} with {len(self.lines)} items, "
            f"total {self.total}"
        )
        try:
            info = run_transaction(session, self._statements(sale_date, allow_negative_stock))
        except Exception as e:
            self.error = e
            self.transition(SaleState.FAILED)
            logger.warning(f"Sale #{self.header.number or '(next)'} failed and was rolled back: {e}")
            raise

        created = info.results[0]
        self.summary = SaleSummary(
            id=created['id'],
            number=created['number'],
            date=sale_date,
            payment_method=self.header.payment_method,
            total=self.total,
        )
        self.transition(SaleState.COMMITTED)
        logger.info(f"Sale #{self.summary.number} committed with id {self.summary.id}")
        return self.summary


def build_submission(
    header: Union[SaleHeader, Dict[str, Any]],
    lines: Iterable[Union[SaleLine, Dict[str, Any]]],
    default_client: str = DEFAULT_CLIENT_NAME
) -> SaleSubmission:
    """Validate header and lines into a DRAFT submission. Nothing is written."""
    if isinstance(header, dict):
        header = SaleHeader.from_dict(header, default_client=default_client)
    if lines is None:
        raise ValidationError('Lista de itens é obrigatória')

    submission = SaleSubmission(header=header)
    for line in lines:
        submission.add_line(line if isinstance(line, SaleLine) else SaleLine.from_dict(line))
    return submission


def create_sale(
    session,
    header: Union[SaleHeader, Dict[str, Any]],
    lines: Iterable[Union[SaleLine, Dict[str, Any]]],
    allow_negative_stock: bool = False,
    today: Optional[date] = None,
    default_client: str = DEFAULT_CLIENT_NAME
) -> SaleSummary:
    """
    Record a sale: header, items and stock decrements, all or nothing.

    Steps (one transaction):
    1. Allocate the sale number if the header has none
    2. Insert the sale header and obtain its id
    3. For each line, in order: insert the item, then decrement stock
    4. Commit once every line is acknowledged

    Args:
        session: SQLAlchemy session
        header: SaleHeader or ``{number?, client?, phone?, paymentMethod}``
        lines: SaleLine objects or ``{productId, quantity, unitPrice, lineTotal?}``
        allow_negative_stock: let stock go below zero instead of rejecting the sale
        today: sale date override

    Returns:
        SaleSummary with id, number, date, payment method and total

    Raises:
        ValidationError: bad input, nothing written
        NotFoundError, InsufficientStockError, ConstraintError, StoreIOError:
            the transaction was rolled back
    """
    submission = build_submission(header, lines, default_client=default_client)

    with _sale_lock:
        try:
            return submission.submit(session, allow_negative_stock=allow_negative_stock, today=today)
        except ComercianteError:
            raise
        except Exception as e:
            raise ComercianteError(f'Erro ao finalizar venda: {str(e)}') from e
