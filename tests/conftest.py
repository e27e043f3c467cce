import pytest
from datetime import date
from decimal import Decimal

from comerciante import create_app
from comerciante.database import close_db, get_session
from comerciante.models import Product


@pytest.fixture(scope='function')
def app():
    """Create application instance with a fresh in-memory store."""
    app = create_app('config.TestingConfig')
    yield app
    close_db()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Create database session for testing."""
    session = get_session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def authenticated_client(client, app):
    """Create client with an operator logged in."""
    with client.session_transaction() as sess:
        sess[app.config['SESSION_AUTH_KEY']] = True
        sess['username'] = 'sistema'
    return client


@pytest.fixture
def today():
    return date(2024, 3, 15)


def _create_product(session, code, name, price, quantity, cost_price=0):
    product = Product(code=code, name=name, price=price, cost_price=cost_price, quantity=quantity)
    session.add(product)
    session.commit()
    return product.id


@pytest.fixture(scope='function')
def product_a(session):
    """Product A: price 10, 5 units in stock."""
    return _create_product(session, 'A001', 'Produto A', 10, 5, cost_price=6)


@pytest.fixture(scope='function')
def product_b(session):
    """Product B: price 20, 2 units in stock."""
    return _create_product(session, 'B001', 'Produto B', 20, 2, cost_price=12)


@pytest.fixture(scope='function')
def product_c(session):
    """Product C: price 2.50, 100 units in stock."""
    return _create_product(session, 'C001', 'Produto C', Decimal('2.50'), 100)


@pytest.fixture
def stock_of(session):
    """Current persisted quantity of a product."""
    def _stock_of(product_id):
        session.expire_all()
        return session.query(Product.quantity).filter(Product.id == product_id).scalar()
    return _stock_of
