import os
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg


def get_database_url() -> str:
    """Get the database URL from environment variables."""
    url = os.environ["DATABASE_URL"]
    return url


def get_sqlalchemy_database_url() -> str:
    """Get the database URL formatted for SQLAlchemy (used by alembic).

    Converts postgresql:// to postgresql+psycopg:// so that psycopg3 is used
    instead of psycopg2.
    """
    url = get_database_url()
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


@contextmanager
def get_db_connection(url: Optional[str] = None) -> Iterator[psycopg.Connection]:
    """Get a database connection context manager.

    The connection is closed explicitly on exit.
    """
    conn = psycopg.connect(url or get_database_url())
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def get_db_cursor(url: Optional[str] = None) -> Iterator[psycopg.Cursor]:
    """Get a cursor whose work is committed as one transaction.

    Commits on successful completion and rolls back if the block raises.
    """
    with get_db_connection(url) as conn:
        with conn.transaction():
            with conn.cursor() as cursor:
                yield cursor
