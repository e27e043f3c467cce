"""Cash-book reports: read-only projections of persisted sales."""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import func

from comerciante.exceptions import ValidationError
from comerciante.models import Product, Sale, SaleItem


def _iso_date(value: Union[date, str, None], field: str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)).isoformat()
    except (TypeError, ValueError):
        raise ValidationError(f'{field} deve estar no formato AAAA-MM-DD')


def list_sales(session) -> List[Sale]:
    """All sales, newest first."""
    return session.query(Sale).order_by(Sale.date.desc(), Sale.id.desc()).all()


def cash_book_total(sales: Iterable[Sale]) -> Decimal:
    return sum((Decimal(sale.total) for sale in sales), Decimal('0.00'))


def get_sale_details(session, sale_id: int) -> Optional[Dict[str, Any]]:
    """
    Sale header plus its items joined with product name and code.

    Returns None if the sale does not exist.
    """
    sale = session.query(Sale).filter(Sale.id == sale_id).first()
    if not sale:
        return None

    rows = (session.query(
                SaleItem.id, SaleItem.product_id, SaleItem.quantity,
                SaleItem.price, SaleItem.total, Product.name, Product.code)
            .join(Product, SaleItem.product_id == Product.id)
            .filter(SaleItem.sale_id == sale_id)
            .order_by(SaleItem.id)
            .all())

    details = sale.to_dict()
    details['items'] = [
        {
            'id': row.id,
            'productId': row.product_id,
            'quantity': int(row.quantity),
            'price': row.price,
            'total': row.total,
            'name': row.name,
            'code': row.code,
        }
        for row in rows
    ]
    return details


def get_cash_summary(session, start_date: Union[date, str], end_date: Union[date, str]) -> List[Dict[str, Any]]:
    """
    Totals per day and payment method between two dates (inclusive).

    Returns:
        list of {date, paymentMethod, totalSales, salesCount}, newest day first
    """
    start = _iso_date(start_date, 'Data inicial')
    end = _iso_date(end_date, 'Data final')
    if start > end:
        raise ValidationError('Data inicial deve ser anterior à data final')

    rows = (session.query(
                Sale.date,
                Sale.payment_method,
                func.sum(Sale.total).label('total_sales'),
                func.count(Sale.id).label('sales_count'))
            .filter(Sale.date.between(start, end))
            .group_by(Sale.date, Sale.payment_method)
            .order_by(Sale.date.desc(), Sale.payment_method)
            .all())

    return [
        {
            'date': row.date,
            'paymentMethod': row.payment_method,
            'totalSales': Decimal(str(row.total_sales or 0)).quantize(Decimal('0.01')),
            'salesCount': row.sales_count,
        }
        for row in rows
    ]
