"""Test fixtures for the Staybook backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from staybook.api import deps
from staybook.core.config import get_settings
from staybook.db.base import Base
from staybook.db.session import dispose_engine, get_sessionmaker
from staybook.main import app
from staybook.models import Property, RoomType

TODAY = date(2024, 6, 1)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def inventory(reset_database: None, db_url: str) -> dict[str, object]:
    """Seed one property with a ten-unit room type priced at 100."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        prop = Property(name="Harbour View Lodge")
        session.add(prop)
        await session.flush()

        room_type = RoomType(
            property_id=prop.id,
            name="Double Room",
            total_units=10,
            base_price=Decimal("100.00"),
        )
        session.add(room_type)
        await session.commit()

        return {"property_id": prop.id, "room_type_id": room_type.id}


@pytest_asyncio.fixture()
async def app_context(inventory: dict[str, object]) -> AsyncIterator[dict[str, object]]:
    """Yield an async client with the clock pinned to ``TODAY``."""
    app.dependency_overrides[deps.get_today] = lambda: TODAY
    context = dict(inventory)
    context["today"] = TODAY
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(deps.get_today, None)
