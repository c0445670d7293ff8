import os

# Must be set before homeboard.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_DEFAULT_USERS", "false")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from homeboard.db.database import build_engine, create_tables, get_db, session_factory, session_scope
from homeboard.main import create_application
from homeboard.models import DEFAULT_USERS, User

EXTRA_MEMBER = {"id": 5, "name": "Sam", "color": "#FFB74D", "initial": "S"}


@pytest_asyncio.fixture
async def engine():
    # Fresh in-memory database per test
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return session_factory(engine)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        session.add_all([User(**cfg) for cfg in DEFAULT_USERS + [EXTRA_MEMBER]])
        await session.commit()
        yield session


@pytest_asyncio.fixture
async def client(session_maker, db):
    app = create_application()

    async def override_get_db():
        async with session_scope(session_maker) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
