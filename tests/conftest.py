"""
Test configuration and fixtures.

Provides:
- A file-backed SQLite database per test (separate connections per session)
- Seeded seller / buyer / admin users, a property and a seller holding
- JWT header minting for authenticated requests
- HTTPX AsyncClient bound to the app with the database dependency overridden
"""
import os
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator

os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)
os.environ.pop("RATE_LIMIT_REDIS_URL", None)
os.environ["RABBITMQ_URL"] = ""

import pytest
from httpx import ASGITransport, AsyncClient

import models.event_listener  # noqa: F401
from app import app
from core.breaker import breaker, integrations_breaker
from core.get_db import Base, build_engine, build_sessionmaker, get_db_async
from core.validators import create_access_token
from models.enums import UserRole
from models.models import Holding, Property, User


@pytest.fixture(autouse=True)
def reset_breakers():
    breaker.reset()
    integrations_breaker.reset()
    yield
    breaker.reset()
    integrations_breaker.reset()


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'invest_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# =============================================================================
# Seed data
# =============================================================================

@dataclass
class Seed:
    seller: User
    buyer: User
    admin: User
    outsider: User
    owner: User
    property: Property
    holding: Holding
    other_holding: Holding


def make_user(name: str, role: UserRole = UserRole.INVESTOR, **extra) -> User:
    return User(
        id=uuid.uuid4(),
        name=name,
        email=f"{name.lower()}-{uuid.uuid4().hex[:8]}@example.com",
        role=role,
        is_active=True,
        **extra,
    )


@pytest.fixture
async def seed(db) -> Seed:
    owner = make_user("Owner", phone="+2348000000000")
    seller = make_user("Seller")
    buyer = make_user("Buyer")
    admin = make_user("Admin", role=UserRole.ADMIN)
    outsider = make_user("Outsider")
    db.add_all([owner, seller, buyer, admin, outsider])
    await db.flush()

    prop = Property(
        id=uuid.uuid4(),
        title="Lekki Gardens Block C",
        property_type="residential",
        created_by_id=owner.id,
    )
    db.add(prop)
    await db.flush()

    holding = Holding(
        id=uuid.uuid4(),
        user_id=seller.id,
        property_id=prop.id,
        amount_invested=Decimal("50000.00"),
        purchase_date=date.today() - timedelta(days=120),
    )
    other_holding = Holding(
        id=uuid.uuid4(),
        user_id=seller.id,
        property_id=prop.id,
        amount_invested=Decimal("20000.00"),
        purchase_date=date.today() - timedelta(days=200),
    )
    db.add_all([holding, other_holding])
    await db.commit()

    return Seed(
        seller=seller,
        buyer=buyer,
        admin=admin,
        outsider=outsider,
        owner=owner,
        property=prop,
        holding=holding,
        other_holding=other_holding,
    )


# =============================================================================
# Auth / client
# =============================================================================

def auth_headers(user: User) -> dict:
    token = create_access_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_async] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def fetch(session_factory):
    """Read a row back through a fresh session, bypassing any identity map."""

    async def _fetch(model, pk):
        async with session_factory() as session:
            return await session.get(model, pk)

    return _fetch
