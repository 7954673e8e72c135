"""
Pytest configuration for the application
"""
import datetime as dt
import os
from typing import AsyncGenerator, Callable, Dict
from uuid import UUID, uuid4

import httpx
import jwt
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.core.config import settings
from src.db.base import Base
from src.db import models  # noqa: F401  (registers tables on Base.metadata)
from src.db.models.product import Product, ProductStatus
from src.db.models.subscription import (
    BillingCycle,
    PlanType,
    Subscription,
    SubscriptionStatus,
)
from src.db.models.user import User
from src.db.session import get_db
from src.api.deps import get_clock
from src.main import create_application
from src.services import limits as limits_service
from src.services.clock import FixedClock


# Set test environment and override runtime settings to avoid external deps
os.environ["ENV"] = "test"
settings.ENV = "test"
settings.scheduler.enabled = False
settings.DATABASE_URI = "sqlite+aiosqlite://"

UTC = dt.timezone.utc
NOW = dt.datetime(2026, 3, 15, 12, 0, tzinfo=UTC)
API_PREFIX = f"{settings.API_PREFIX}/v1"


class FakeRedis:
    """Minimal async Redis stub for rate limiting and idempotency tests."""

    def __init__(self) -> None:
        self.store: Dict[str, int | str] = {}

    async def incr(self, key: str) -> int:
        current = int(self.store.get(key, 0)) + 1
        self.store[key] = current
        return current

    async def expire(self, key: str, seconds: int) -> None:
        self.store.setdefault(f"{key}:ttl", seconds)

    async def set(self, key: str, value: str, ex: int | None = None, nx: bool = False) -> bool:
        if nx and key in self.store:
            return False
        self.store[key] = value
        if ex is not None:
            self.store[f"{key}:ttl"] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.store.pop(f"{key}:ttl", None)
        return removed

    async def aclose(self) -> None:
        return None


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    """Patch the limits module to use an in-memory Redis stub."""

    fake = FakeRedis()
    monkeypatch.setattr(limits_service, "_redis_client", fake, raising=False)
    yield fake
    monkeypatch.setattr(limits_service, "_redis_client", None, raising=False)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest_asyncio.fixture
async def test_db_engine():
    """
    Create an in-memory database engine with all tables.
    """
    engine = create_async_engine(
        str(settings.DATABASE_URI),
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for a test.
    """
    session_factory = async_sessionmaker(test_db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_app(test_db: AsyncSession, clock: FixedClock) -> AsyncGenerator[FastAPI, None]:
    """
    Create a FastAPI test application sharing the test session and clock.
    """
    app = create_application()

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    async with LifespanManager(app):
        yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create an async HTTP client for testing.
    """
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as client:
        yield client


def build_auth_header(user_id: UUID) -> Dict[str, str]:
    token = jwt.encode({"user_id": str(user_id)}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header() -> Callable[[UUID], Dict[str, str]]:
    return build_auth_header


@pytest.fixture
def make_user(test_db: AsyncSession):
    async def _make_user(email: str | None = None) -> User:
        user = User(email=email or f"{uuid4().hex[:8]}@example.com", full_name="Test User")
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_subscription(test_db: AsyncSession):
    async def _make_subscription(
        user_id: UUID,
        *,
        plan: PlanType = PlanType.PREMIUM,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVA,
        start_date: dt.datetime | None = None,
        end_date: dt.datetime | None = None,
        products_limit: int = 50,
        featured_products_limit: int = 5,
        analytics_enabled: bool = True,
        created_at: dt.datetime | None = None,
    ) -> Subscription:
        subscription = Subscription(
            user_id=user_id,
            plan=plan,
            billing_cycle=BillingCycle.MENSUAL,
            price=9900,
            start_date=start_date or NOW - dt.timedelta(days=1),
            end_date=end_date or NOW + dt.timedelta(days=30),
            status=status,
            products_limit=products_limit,
            featured_products_limit=featured_products_limit,
            analytics_enabled=analytics_enabled,
        )
        if created_at is not None:
            subscription.created_at = created_at
        test_db.add(subscription)
        await test_db.commit()
        await test_db.refresh(subscription)
        return subscription

    return _make_subscription


@pytest.fixture
def make_products(test_db: AsyncSession):
    async def _make_products(
        seller_id: UUID,
        count: int,
        *,
        status: ProductStatus = ProductStatus.AVAILABLE,
        featured: bool = False,
    ) -> list[Product]:
        products = [
            Product(
                seller_id=seller_id,
                title=f"Item {index}",
                price=1500,
                status=status,
                featured=featured,
            )
            for index in range(count)
        ]
        test_db.add_all(products)
        await test_db.commit()
        return products

    return _make_products
