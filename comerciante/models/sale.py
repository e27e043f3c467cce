"""Sale model."""
from sqlalchemy import Column, Integer, String, Numeric
from sqlalchemy.orm import relationship
from comerciante.database import Base
from comerciante.exceptions import ValidationError
import enum


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods."""
    PIX = 'PIX'
    CARD = 'Card'
    CASH = 'Cash'


# Labels the mobile app stored before the methods were normalized
_PAYMENT_ALIASES = {
    'PIX': PaymentMethod.PIX,
    'CARD': PaymentMethod.CARD,
    'CARTAO': PaymentMethod.CARD,
    'CARTÃO': PaymentMethod.CARD,
    'CASH': PaymentMethod.CASH,
    'DINHEIRO': PaymentMethod.CASH,
}


def normalize_payment_method(value) -> str:
    """
    Normalize payment method value to string for DB storage.

    Args:
        value: PaymentMethod enum or string (case-insensitive, legacy labels accepted)

    Returns:
        str: 'PIX', 'Card' or 'Cash'

    Raises:
        ValidationError: If value is missing or unknown
    """
    if isinstance(value, PaymentMethod):
        return value.value

    if isinstance(value, str):
        method = _PAYMENT_ALIASES.get(value.strip().upper())
        if method is not None:
            return method.value

    raise ValidationError(
        f'Forma de pagamento inválida: {value!r}. Use PIX, Card ou Cash.'
    )


class Sale(Base):
    """Sale (venda finalizada). Immutable once committed."""

    __tablename__ = 'sales'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String, nullable=False, unique=True)
    client = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    total = Column(Numeric(10, 2), nullable=False)
    date = Column(String(10), nullable=False)
    payment_method = Column('paymentMethod', String, nullable=False)

    # Relationships
    items = relationship('SaleItem', back_populates='sale', order_by='SaleItem.id')

    def __repr__(self):
        return f"<Sale(id={self.id}, number='{self.number}', total={self.total})>"

    def to_dict(self):
        return {
            'id': self.id,
            'number': self.number,
            'client': self.client,
            'phone': self.phone,
            'total': self.total,
            'date': self.date,
            'paymentMethod': self.payment_method,
        }
