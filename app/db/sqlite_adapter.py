"""
SQLite backend (sqlite+aiosqlite://).

Used for local runs, tests and small single-instance deployments. The
redirect path only reads, so SQLite's single-writer lock is rarely
contended: writes come from the administrative side alone.
"""

from typing import Any

from sqlalchemy.pool import NullPool

from app.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    - NullPool: the file is opened per session, nothing to keep warm
    - check_same_thread=False: aiosqlite runs the connection in a worker thread
    """

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {"check_same_thread": False}

    def get_engine_kwargs(self) -> dict[str, Any]:
        # echo=True prints every statement; debugging only
        return {"echo": False}

    def get_dialect_name(self) -> str:
        return "sqlite"
