"""Shared pytest fixtures."""

import os

# Settings are read at import time; keep tests off Postgres, Redis and the live Amadeus API
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AMADEUS_CLIENT_ID"] = ""
os.environ["AMADEUS_CLIENT_SECRET"] = ""
os.environ["AFFILIATE_LABELS_DEMO"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_URL"] = ""

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.database import Base
from app.schemas.itinerary import TripRequest
from app.schemas.race import RaceWeekend
from app.services.amadeus_client import AmadeusClient
from app.services.link_builder import AffiliateConfig, LinkBuilder
from app.services.race_catalog import RaceCatalog

FIXED_NOW = 1_780_000_000.0
AMADEUS_BASE = "https://amadeus.test"


@pytest.fixture
def catalog() -> RaceCatalog:
    return RaceCatalog()


@pytest.fixture
def monaco(catalog: RaceCatalog) -> RaceWeekend:
    return catalog.get_race_by_id(2026, "monaco-gp")


@pytest.fixture
def london_request() -> TripRequest:
    return TripRequest(origin_city="London", race_id="monaco-gp", duration_days=5, budget_tier="$$")


@pytest.fixture
def builder() -> LinkBuilder:
    """Link builder with no partner IDs and a frozen clock."""
    return LinkBuilder(AffiliateConfig(), clock=lambda: FIXED_NOW)


@pytest.fixture
def amadeus_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], AmadeusClient]:
    """Build an AmadeusClient whose HTTP traffic goes to a handler function."""

    def _make(handler) -> AmadeusClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return AmadeusClient(
            client_id="test-id",
            client_secret="test-secret",
            base_url=AMADEUS_BASE,
            http_client=http_client,
        )

    return _make


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
