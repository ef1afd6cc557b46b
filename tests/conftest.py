"""
Shared fixtures: a throwaway SQLite database per test, sessions on it,
and an application wired to the same file with the counter date pinned.
"""

import copy

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from delivery_api.core.config import Settings
from delivery_api.database import create_engine, create_session_maker, init_db
from delivery_api.main import create_app
from delivery_api.services import get_today

DAY = "2024-05-10"

ORDER_BODY = {
    "delivery": {
        "bread": "Pão francês",
        "drink": "Suco de laranja",
        "local": False,
        "meats": "Picanha",
        "salad": "Alface e tomate",
        "sideDish": "Arroz",
    },
    "address": {
        "address": "Rua das Flores, 123",
        "city": "Curitiba",
        "complement": "Apto 42",
        "neighborhood": "Centro",
        "postalCode": "80010-000",
        "state": "PR",
    },
    "payment": {
        "attachment": {"mime": "application/pdf", "size": 2048},
        "fileName": "comprovante.pdf",
    },
}


@pytest.fixture
def make_payload():
    """Factory for a valid order body; keyword args replace whole sections."""
    def _make(**sections):
        body = copy.deepcopy(ORDER_BODY)
        body.update(sections)
        return body
    return _make


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'deliveries.db'}")


@pytest_asyncio.fixture
async def session_maker(settings):
    engine = create_engine(settings.database_url, settings)
    await init_db(engine)
    yield create_session_maker(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db:
        yield db


@pytest.fixture
def clock():
    """Mutable date the app's counter uses; tests may change clock['today']."""
    return {"today": DAY}


@pytest_asyncio.fixture
async def app(settings, clock):
    application = create_app(settings)
    application.dependency_overrides[get_today] = lambda: clock["today"]
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
