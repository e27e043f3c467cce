"""
Product ledger: catalog CRUD and relative stock mutations.

Stock is only ever changed by deltas (``quantity = quantity - n``) so that a
write issued by one caller can never overwrite another caller's update with
a stale absolute value.
"""
import logging
from typing import Any, Dict, List, Optional

from comerciante.database import run_transaction
from comerciante.exceptions import NotFoundError, InsufficientStockError, ValidationError
from comerciante.models import Product
from comerciante.utils.number_format import parse_money, parse_quantity

logger = logging.getLogger(__name__)


def validate_product_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate catalog form fields and return normalized column values.

    Required: code, name, price. Optional: costPrice (default 0), quantity (default 0).

    Raises:
        ValidationError: before any write is attempted
    """
    code = str(data.get('code') or '').strip()
    name = str(data.get('name') or '').strip()

    if not code or not name or data.get('price') in (None, ''):
        raise ValidationError(
            'Preencha os campos obrigatórios: código, nome e preço de venda.'
        )

    cost = data.get('costPrice')
    quantity = data.get('quantity')

    return {
        'code': code,
        'name': name,
        'price': parse_money(data.get('price'), 'Preço de venda'),
        'cost_price': parse_money(cost, 'Preço de custo') if cost not in (None, '') else parse_money(0),
        'quantity': parse_quantity(quantity, 'Quantidade') if quantity not in (None, '') else 0,
    }


def list_products(session, search: Optional[str] = None) -> List[Product]:
    """
    Return products ordered by name.

    ``search`` keeps only products whose name contains it, case-insensitively.
    """
    query = session.query(Product)
    if search:
        query = query.filter(Product.name.ilike(f'%{search.strip()}%'))
    return query.order_by(Product.name, Product.id).all()


def get_product(session, product_id: int) -> Optional[Product]:
    """Get product by id, or None if it does not exist."""
    return session.query(Product).filter(Product.id == product_id).first()


def get_product_or_404(session, product_id: int) -> Product:
    product = get_product(session, product_id)
    if not product:
        raise NotFoundError(f'Produto #{product_id} não encontrado')
    return product


def add_product(session, data: Dict[str, Any]) -> int:
    """Insert a product and return its generated id."""
    values = validate_product_data(data)

    def _insert(s, _results):
        product = Product(**values)
        s.add(product)
        s.flush()
        return product.id

    info = run_transaction(session, [_insert])
    logger.info(f"Product created: id={info.last} code={values['code']}")
    return info.last


def update_product(session, product_id: int, data: Dict[str, Any]) -> bool:
    """
    Overwrite a product's catalog fields.

    This is the manual edit path; sales never go through it.

    Returns:
        True if a row was updated, False if the product does not exist
    """
    values = validate_product_data(data)
    columns = {getattr(Product, key): value for key, value in values.items()}

    info = run_transaction(session, [
        lambda s, _results: s.query(Product)
        .filter(Product.id == product_id)
        .update(columns, synchronize_session=False)
    ])
    updated = info.last > 0
    if not updated:
        logger.warning(f"Product {product_id} not updated: not found")
    return updated


def delete_product(session, product_id: int) -> bool:
    """
    Delete a product.

    Products referenced by sale items cannot be deleted; the store raises
    ConstraintError in that case.
    """
    info = run_transaction(session, [
        lambda s, _results: s.query(Product)
        .filter(Product.id == product_id)
        .delete(synchronize_session=False)
    ])
    return info.last > 0


def decrement_stock(session, product_id: int, amount: int, allow_negative: bool = False) -> int:
    """
    Subtract ``amount`` from a product's quantity inside the caller's transaction.

    Issued as ``UPDATE products SET quantity = quantity - :amount``. When
    ``allow_negative`` is false the update only matches rows holding at least
    ``amount`` units, so an oversell never reaches storage.

    Does not commit; meant to run as a statement of run_transaction().

    Returns:
        rows affected (always 1 on success)

    Raises:
        NotFoundError: the product does not exist
        InsufficientStockError: not enough units and negatives are disallowed
    """
    query = session.query(Product).filter(Product.id == product_id)
    if not allow_negative:
        query = query.filter(Product.quantity >= amount)

    rows = query.update(
        {Product.quantity: Product.quantity - amount},
        synchronize_session=False
    )

    if rows == 0:
        # Read the row, not the identity map: the update bypassed the session
        current = (session.query(Product.name, Product.quantity)
                   .filter(Product.id == product_id)
                   .first())
        if current is None:
            raise NotFoundError(f'Produto #{product_id} não encontrado')
        raise InsufficientStockError(current.name, amount, current.quantity)

    logger.debug(f"Stock of product {product_id} decremented by {amount}")
    return rows


def list_low_stock(session, threshold: int) -> List[Dict[str, Any]]:
    """
    Products whose quantity is below ``threshold``.

    Each entry carries ``missing``: the units needed to reach the threshold.
    """
    products = (session.query(Product)
                .filter(Product.quantity < threshold)
                .order_by(Product.quantity, Product.name)
                .all())
    return [
        dict(product.to_dict(), missing=threshold - product.quantity)
        for product in products
    ]
