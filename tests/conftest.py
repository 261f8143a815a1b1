from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import inventory_app.models  # noqa: F401
from inventory_app.api.deps import get_weather
from inventory_app.db.database import Base, get_db
from inventory_app.main import app
from inventory_app.services import mutations


class FakeWeather:
    """Stands in for the cached weather lookup and records every city asked for."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    async def __call__(self, city_id: int) -> str:
        self.calls.append(city_id)
        return f"weather for {city_id}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def weather() -> FakeWeather:
    return FakeWeather()


@pytest.fixture
def make_product(db):
    def _make(name: str, price: str = "9.99", description: str | None = None) -> int:
        result = mutations.create_product(db, name, Decimal(price), description)
        assert result.ok, result.error
        return result.entity_id

    return _make


@pytest.fixture
def make_warehouse(db):
    def _make(name: str, city_name: str = "Springfield") -> int:
        result = mutations.create_warehouse(db, name, city_name=city_name)
        assert result.ok, result.error
        return result.entity_id

    return _make


@pytest_asyncio.fixture
async def client(session_factory, weather):
    def _override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_weather] = lambda: weather
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
