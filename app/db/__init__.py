"""
Persistence layer for cloaked links.

Backends are chosen from DATABASE_URL by app.db.factory; callers only use
the session helpers re-exported here.
"""

from app.db.session import async_session_maker, dispose_engine, get_session, init_db

__all__ = [
    "async_session_maker",
    "dispose_engine",
    "get_session",
    "init_db",
]
