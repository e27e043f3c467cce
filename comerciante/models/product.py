"""Product model."""
from sqlalchemy import Column, Integer, String, Numeric
from comerciante.database import Base


class Product(Base):
    """Product (item do catálogo)."""

    __tablename__ = 'products'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    cost_price = Column('costPrice', Numeric(10, 2), nullable=True, default=0)
    quantity = Column(Integer, nullable=False, default=0, server_default='0')

    def __repr__(self):
        return f"<Product(id={self.id}, code='{self.code}', quantity={self.quantity})>"

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'name': self.name,
            'price': self.price,
            'costPrice': self.cost_price,
            'quantity': self.quantity,
        }
