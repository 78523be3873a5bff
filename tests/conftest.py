"""
Shared test configuration.

Environment overrides must be in place before app.core.setting is imported,
so they are set at module import time here.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
# Low limit so the rate limit test can exhaust it; the limiter is off elsewhere
os.environ.setdefault("REDIRECT_RATE_LIMIT", "2/minute")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession  # noqa: E402

from app.db.models import CloakedLinkRecord, DestinationRecord  # noqa: E402
from app.db.sqlite_adapter import SQLiteAdapter  # noqa: E402
from app.services.link_repository import InMemoryLinkRepository  # noqa: E402


def make_record(slug: str, destinations) -> CloakedLinkRecord:
    """Build a read record without going through write-side validation."""
    return CloakedLinkRecord(
        slug=slug,
        destination_urls=None if destinations is None else [DestinationRecord(**d) for d in destinations],
    )


@pytest.fixture
def repository() -> InMemoryLinkRepository:
    """In-memory repository holding the end-to-end scenario links."""
    repo = InMemoryLinkRepository()
    repo.put(make_record("/go/promo", [
        {"url": "https://a.example", "weight": 2},
        {"url": "https://b.example", "weight": 0},
    ]))
    repo.put(make_record("/go/empty", []))
    repo.put(make_record("/go/split", [
        {"url": "https://a.example", "weight": 3, "label": "A"},
        {"url": "https://b.example", "weight": 1, "label": "B"},
    ]))
    repo.put(make_record("/go/parked", [
        {"url": "https://first.example", "weight": 0},
        {"url": "https://second.example", "weight": -1},
    ]))
    return repo


@pytest_asyncio.fixture
async def sqlite_session():
    """Session on a fresh in-memory SQLite database with the schema created."""
    adapter = SQLiteAdapter()
    # StaticPool keeps the single in-memory connection alive across sessions
    engine = adapter.create_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await adapter.create_schema(engine)

    session_maker = async_sessionmaker(engine, class_=SQLModelAsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()
