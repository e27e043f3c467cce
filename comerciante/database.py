"""Database configuration, schema initialization and transaction execution."""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Sequence

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from comerciante.exceptions import (
    ComercianteError, ConstraintError, SchemaError, StoreIOError
)

logger = logging.getLogger(__name__)

# Create SQLAlchemy base
Base = declarative_base()

# Process-wide engine and session registry, created once by init_db()
engine = None
db_session = None

# A statement receives the session and the results of the statements
# submitted before it in the same transaction.
Statement = Callable[[Any, List[Any]], Any]


@dataclass
class CommitInfo:
    """Outcome of a committed transaction."""
    statements: int
    results: List[Any] = field(default_factory=list)

    @property
    def last(self):
        return self.results[-1] if self.results else None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys = ON')
    cursor.close()


def build_engine(database_uri: str, echo: bool = False):
    """Create the engine for the configured store."""
    kwargs = {'echo': echo}
    is_sqlite = database_uri.startswith('sqlite')

    if is_sqlite:
        kwargs['connect_args'] = {'check_same_thread': False}
        if database_uri in ('sqlite://', 'sqlite:///:memory:'):
            # Every connection to :memory: is a new database; share one.
            kwargs['poolclass'] = StaticPool
    else:
        kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)

    new_engine = create_engine(database_uri, **kwargs)
    if is_sqlite:
        event.listen(new_engine, 'connect', _enable_sqlite_foreign_keys)
    return new_engine


def init_schema(target_engine) -> None:
    """
    Create products, sales and sale_items if they do not exist.

    Safe to call on every start-up. Raises SchemaError on failure.
    """
    # Register model tables on Base.metadata
    import comerciante.models  # noqa: F401

    try:
        Base.metadata.create_all(bind=target_engine, checkfirst=True)
    except SQLAlchemyError as e:
        logger.error(f"Schema initialization failed: {e}")
        raise SchemaError(f'Erro ao criar tabelas: {e}') from e
    logger.info("Schema ready: %s", ', '.join(sorted(Base.metadata.tables)))


def init_db(app):
    """Initialize database connection and schema."""
    global engine, db_session

    engine = build_engine(
        app.config['SQLALCHEMY_DATABASE_URI'],
        echo=app.config.get('SQLALCHEMY_ECHO', False)
    )

    db_session = registry = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )

    init_schema(engine)

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            registry.rollback()
        registry.remove()


def close_db():
    """Release the session registry and the engine's connections."""
    global engine, db_session
    if db_session is not None:
        db_session.remove()
    if engine is not None:
        engine.dispose()
    engine = None
    db_session = None


def get_session():
    """Get database session."""
    return db_session


def run_transaction(session, statements: Sequence[Statement]) -> CommitInfo:
    """
    Execute an ordered batch of statements as one transaction.

    Statements run strictly in submission order, each one after the previous
    has completed, so a statement can use an id generated by an earlier one
    (available in ``results``). The first failure rolls back the whole batch
    and is re-raised: application errors unchanged, driver errors translated
    into ConstraintError or StoreIOError.

    Args:
        session: SQLAlchemy session
        statements: callables ``statement(session, results) -> result``

    Returns:
        CommitInfo with the number of executed statements and their results
    """
    results: List[Any] = []
    try:
        for statement in statements:
            results.append(statement(session, results))
        session.commit()
    except ComercianteError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Transaction rolled back after {len(results)} statements: {e.orig}")
        raise ConstraintError(f'Violação de integridade: {e.orig}') from e
    except (OperationalError, DBAPIError) as e:
        session.rollback()
        logger.error(f"Storage error, transaction rolled back: {e}")
        raise StoreIOError(f'Erro de armazenamento: {e.orig}') from e
    except Exception:
        session.rollback()
        raise

    return CommitInfo(statements=len(results), results=results)


def reset_store(session) -> CommitInfo:
    """Delete every sale item, sale and product in one transaction."""
    from comerciante.models import Product, Sale, SaleItem

    def _delete(model):
        return lambda s, _results: s.query(model).delete(synchronize_session=False)

    info = run_transaction(session, [_delete(SaleItem), _delete(Sale), _delete(Product)])
    logger.info(
        "Store cleared: %s items, %s sales, %s products",
        *info.results
    )
    return info

