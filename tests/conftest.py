"""
Test configuration and fixtures
In-memory SQLite database, outbound HTTP replaced by httpx.MockTransport
"""

import asyncio
import json
import pytest
import pytest_asyncio
from typing import AsyncGenerator, Callable, List
from datetime import datetime, timedelta, timezone
import os

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# Set test environment
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-jwt-secret-that-is-long-enough-for-hs256"
os.environ["ADMIN_PASSWORD"] = "correct-horse-battery-staple"
os.environ["PROMETHEUS_ENABLED"] = "false"

# Import all models BEFORE creating fixtures (critical for create_all to work)
from app.core.database import Base
from app.models.analytics import AnalyticsEvent, EventType
from app.models.content import SiteContent
from app.models.integration import IntegrationConfig
from app.core.background import BackgroundRunner
from app.core.security import create_admin_token
from app.services.dispatch_service import AdDispatcher
from app.services.geolocation_service import GeoLocator

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]
PUBLIC_IP = "177.70.10.20"


@pytest_asyncio.fixture(scope="function")
async def test_db():
    """Create async database engine for tests"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_db) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async_session_maker = async_sessionmaker(
        test_db,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


class RecordingHandler:
    """MockTransport handler that records requests and replies via ``respond``"""

    def __init__(self, respond: Callable = None):
        self.requests: List[httpx.Request] = []
        self.respond = respond or (lambda request: httpx.Response(200, json={}))

    async def __call__(self, request: httpx.Request):
        self.requests.append(request)
        result = self.respond(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    def json_bodies(self):
        return [json.loads(request.content) for request in self.requests]

    def hosts(self):
        return [request.url.host for request in self.requests]


def geo_success(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={
        "status": "success",
        "city": "Campinas",
        "region": "SP",
        "regionName": "Sao Paulo",
        "country": "Brazil",
    })


@pytest.fixture
def geo_handler():
    """Geo-IP service answering with a fixed location"""
    return RecordingHandler(geo_success)


@pytest.fixture
def ad_handler():
    """Ad platforms accepting every event"""
    return RecordingHandler()


@pytest_asyncio.fixture
async def geo_locator(geo_handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(geo_handler))
    locator = GeoLocator(client=client, timeout=0.5)
    yield locator
    await locator.close()


@pytest_asyncio.fixture
async def dispatcher(ad_handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(ad_handler))
    ad_dispatcher = AdDispatcher(client=client, runner=BackgroundRunner(max_pending=10))
    yield ad_dispatcher
    await ad_dispatcher.close(timeout=0.1)


@pytest_asyncio.fixture
async def client(db_session, geo_locator, dispatcher):
    """Create test client with dependency override"""
    from app.main import app
    from app.core.database import get_session
    from app.dependencies import get_dispatcher, get_geo_locator

    def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_geo_locator] = lambda: geo_locator
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer header for the admin"""
    return {"Authorization": f"Bearer {create_admin_token()}"}


@pytest.fixture
def public_ip_headers():
    return {
        "x-forwarded-for": f"{PUBLIC_IP}, 10.0.0.1",
        "user-agent": "Mozilla/5.0 (Linux; Android 14)",
        "referer": "https://landing.example.com/?utm_source=instagram",
    }


@pytest_asyncio.fixture
async def all_integrations(db_session):
    """Credentials stored for all three platforms"""
    configs = [
        IntegrationConfig(key="facebook", data={"pixelId": "111", "accessToken": "fb-token"}),
        IntegrationConfig(key="google", data={"measurementId": "G-TEST", "apiSecret": "ga-secret"}),
        IntegrationConfig(key="tiktok", data={"pixelId": "222", "accessToken": "tt-token"}),
    ]
    db_session.add_all(configs)
    await db_session.commit()
    return configs


def days_ago(days: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


@pytest.fixture
def create_events(db_session):
    """Insert events from (type, days ago, extra fields) tuples"""
    async def _create(specs) -> List[AnalyticsEvent]:
        events = []
        for event_type, age_days, fields in specs:
            event = AnalyticsEvent(type=EventType(event_type), date=days_ago(age_days), **fields)
            events.append(event)
            db_session.add(event)
        await db_session.commit()
        return events

    return _create


@pytest_asyncio.fixture
async def sample_content(db_session):
    """Three content rows, one inactive, inserted out of display order"""
    items = [
        SiteContent(section="hero", type="text", title="Second", content="b", order=2),
        SiteContent(section="hero", type="text", title="Hidden", content="x", order=0, is_active=False),
        SiteContent(section="video", type="youtube", title="First", url="dQw4w9WgXcQ", order=1),
    ]
    db_session.add_all(items)
    await db_session.commit()
    for item in items:
        await db_session.refresh(item)
    return items
