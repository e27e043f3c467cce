"""
Unit tests for transaction execution and schema initialization.
"""

import pytest
from decimal import Decimal
from sqlalchemy.exc import OperationalError

from comerciante import database
from comerciante.database import CommitInfo, init_schema, reset_store, run_transaction
from comerciante.exceptions import ConstraintError, NotFoundError, SchemaError, StoreIOError
from comerciante.models import Product, Sale, SaleItem


def _insert_product(code, quantity=1):
    def statement(session, results):
        product = Product(code=code, name=f'Produto {code}', price=Decimal('1.00'), quantity=quantity)
        session.add(product)
        session.flush()
        return product.id
    return statement


class TestRunTransaction:

    def test_commits_all_statements_in_order(self, session):
        info = run_transaction(session, [_insert_product('P1'), _insert_product('P2')])

        assert isinstance(info, CommitInfo)
        assert info.statements == 2
        assert info.results[0] < info.results[1]
        assert info.last == info.results[1]
        assert [p.code for p in session.query(Product).order_by(Product.id)] == ['P1', 'P2']

    def test_later_statement_sees_prior_generated_id(self, session):
        """Test that a statement can use the id produced earlier in the batch."""
        def read_back(s, results):
            return s.query(Product.code).filter(Product.id == results[0]).scalar()

        info = run_transaction(session, [_insert_product('P1'), read_back])

        assert info.results[1] == 'P1'

    def test_application_error_rolls_back_everything(self, session):
        def fail(s, results):
            raise NotFoundError('Produto #42 não encontrado')

        with pytest.raises(NotFoundError):
            run_transaction(session, [_insert_product('P1'), _insert_product('P2'), fail])

        assert session.query(Product).count() == 0

    def test_integrity_error_becomes_constraint_error(self, session):
        def orphan_item(s, results):
            s.add(SaleItem(sale_id=123, product_id=results[0], quantity=1,
                           price=Decimal('1'), total=Decimal('1')))
            s.flush()

        with pytest.raises(ConstraintError) as exc_info:
            run_transaction(session, [_insert_product('P1'), orphan_item])

        assert exc_info.value.status_code == 409
        assert session.query(Product).count() == 0

    def test_operational_error_becomes_store_io_error(self, session):
        def storage_down(s, results):
            raise OperationalError('UPDATE products', {}, Exception('disk I/O error'))

        with pytest.raises(StoreIOError) as exc_info:
            run_transaction(session, [_insert_product('P1'), storage_down])

        assert exc_info.value.status_code == 503
        assert session.query(Product).count() == 0

    def test_empty_batch_commits(self, session):
        info = run_transaction(session, [])

        assert info.statements == 0
        assert info.last is None


class TestInitSchema:

    def test_failure_raises_schema_error(self, app, monkeypatch):
        def broken_create_all(*args, **kwargs):
            raise OperationalError('CREATE TABLE products', {}, Exception('database is locked'))

        monkeypatch.setattr(type(database.Base.metadata), 'create_all', broken_create_all)

        with pytest.raises(SchemaError):
            init_schema(database.engine)


class TestResetStore:

    def test_deletes_items_sales_and_products(self, session, product_a):
        sale = Sale(number='0001', client='Ana', phone='', total=Decimal('10'),
                    date='2024-03-15', payment_method='PIX')
        session.add(sale)
        session.flush()
        session.add(SaleItem(sale_id=sale.id, product_id=product_a, quantity=1,
                             price=Decimal('10'), total=Decimal('10')))
        session.commit()

        info = reset_store(session)

        assert info.results == [1, 1, 1]
        assert session.query(SaleItem).count() == 0
        assert session.query(Sale).count() == 0
        assert session.query(Product).count() == 0
