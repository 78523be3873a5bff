"""
Database adapter factory.

Picks the adapter from the dialect part of the connection string, so
switching backends is a DATABASE_URL change only.
"""

from sqlalchemy.engine import make_url

from app.db.interface import DatabaseAdapter
from app.db.postgres_adapter import PostgreSQLAdapter
from app.db.sqlite_adapter import SQLiteAdapter

_ADAPTERS: dict[str, type[DatabaseAdapter]] = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgreSQLAdapter,
}


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Return the adapter for a database URL.

    Raises:
        ValueError: If the dialect has no adapter
    """
    dialect = make_url(database_url).get_backend_name()
    try:
        adapter_class = _ADAPTERS[dialect]
    except KeyError:
        raise ValueError(f"Unsupported database dialect: '{dialect}'") from None
    return adapter_class()
