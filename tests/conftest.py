import pytest
from fastapi.testclient import TestClient

from bookcafe.core.config import Settings
from bookcafe.database.db import build_engine, build_session_factory, init_models
from bookcafe.main import create_app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'books.db'}",
        RATE_LIMIT_ENABLED=False,
        ENVIRONMENT="development",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    async with build_session_factory(engine)() as session:
        yield session
