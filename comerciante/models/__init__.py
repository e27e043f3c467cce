"""Models package - exports all SQLAlchemy models."""
from comerciante.models.product import Product
from comerciante.models.sale import Sale, PaymentMethod, normalize_payment_method
from comerciante.models.sale_item import SaleItem

__all__ = [
    'Product',
    'Sale', 'PaymentMethod', 'normalize_payment_method',
    'SaleItem',
]
