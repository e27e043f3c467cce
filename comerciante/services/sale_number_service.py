"""Sale number allocation."""
from sqlalchemy import Integer, cast, func

from comerciante.models import Sale

SALE_NUMBER_WIDTH = 4


def format_sale_number(value: int) -> str:
    return str(value).zfill(SALE_NUMBER_WIDTH)


def next_sale_number(session) -> str:
    """
    Next merchant-facing sale number: highest persisted number + 1, zero-padded.

    Numbers are stored as text, so they are cast to integer before taking the
    maximum ("0010" > "0009"). Reads persisted state every time; a sale that
    failed and rolled back leaves no gap. Returns "0001" on an empty store.
    """
    max_number = session.query(func.max(cast(Sale.number, Integer))).scalar()
    return format_sale_number((max_number or 0) + 1)
