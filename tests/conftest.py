"""Pytest configuration and fixtures for debtdesk.

Store and end-to-end tests run on sqlite+aiosqlite with the schema built from
Base.metadata. HTTP tests use debtdesk.main.create_app with get_db and
get_db_transactional overridden to a per-test database file.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-bearer-tokens"
os.environ["REDIS_ENABLED"] = "false"

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from debtdesk.core.config import get_settings

get_settings.cache_clear()

from debtdesk.core.limiter import limiter
from debtdesk.domain.capabilities import default_permissions_for
from debtdesk.infrastructure.persistence.database import (
    Base,
    get_db,
    get_db_transactional,
    run_after_commit,
)
from debtdesk.infrastructure.persistence.models import (
    Agency,
    Buyer,
    Client,
    Identity,
    Portfolio,
)
from debtdesk.infrastructure.persistence.repositories import RoleGrantRepository
from debtdesk.main import create_app
from debtdesk.shared.utils.datetime import utc_now


@dataclass(frozen=True)
class SeedData:
    """Ids of the rows every store/API test starts with."""

    admin_id: str
    agent_id: str
    client_user_id: str
    suspended_id: str
    stranger_id: str
    agency_id: str
    other_agency_id: str
    client_id: str
    buyer_id: str
    portfolio_id: str
    other_portfolio_id: str


async def _seed(session: AsyncSession) -> SeedData:
    agency = Agency(id="agency-1", name="Acme Recovery")
    other_agency = Agency(id="agency-2", name="Other Recovery")
    client = Client(id="client-1", name="Northwind Bank", agency_id=agency.id)
    buyer = Buyer(id="buyer-1", company_name="Debt Buyers Ltd")
    portfolio = Portfolio(
        id="portfolio-1", name="Q1 Cards", agency_id=agency.id, client_id=client.id
    )
    other_portfolio = Portfolio(
        id="portfolio-2", name="Q2 Loans", agency_id=other_agency.id, client_id=None
    )
    session.add_all(
        [
            agency,
            other_agency,
            client,
            buyer,
            portfolio,
            other_portfolio,
            Identity(id="u-admin", email="admin@example.com"),
            Identity(id="u-agent", email="agent@example.com"),
            Identity(id="u-client", email="client@example.com"),
            Identity(id="u-suspended", email="suspended@example.com", status="suspended"),
            Identity(id="u-stranger", email="stranger@example.com"),
        ]
    )
    await session.flush()
    return SeedData(
        admin_id="u-admin",
        agent_id="u-agent",
        client_user_id="u-client",
        suspended_id="u-suspended",
        stranger_id="u-stranger",
        agency_id=agency.id,
        other_agency_id=other_agency.id,
        client_id=client.id,
        buyer_id=buyer.id,
        portfolio_id=portfolio.id,
        other_portfolio_id=other_portfolio.id,
    )


class InMemoryCache:
    """Dict-backed permission cache with the CacheService methods (TTL ignored)."""

    def __init__(self) -> None:
        self.store: dict[str, Any] = {}

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any:
        return self.store.get(key)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self.store[key] = value

    async def delete(self, key: str) -> None:
        self.store.pop(key, None)


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
async def engine():
    """In-memory sqlite engine with the full schema."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncSession:
    """Session for Role Store / Session Store tests. Repositories flush, never commit."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seed(db_session: AsyncSession) -> SeedData:
    return await _seed(db_session)


@pytest.fixture
async def file_session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    """Session factory on a per-test database file (one connection per session)."""
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'debtdesk.db'}", poolclass=NullPool
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(eng, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await eng.dispose()


@pytest.fixture
async def api_seed(file_session_factory) -> SeedData:
    async with file_session_factory() as session:
        async with session.begin():
            return await _seed(session)


@pytest.fixture
def app(file_session_factory):
    """FastAPI app with DB dependencies bound to the per-test database file."""
    application = create_app()

    async def _get_db():
        async with file_session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with file_session_factory() as session:
            async with session.begin():
                yield session
            await run_after_commit(session)

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_db_transactional] = _get_db_transactional
    limiter.enabled = False
    yield application
    limiter.enabled = True
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_bearer_token(identity_id: str, *, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Sign an identity-provider style JWT for identity_id."""
    settings = get_settings()
    return jwt.encode(
        {"sub": identity_id, "exp": utc_now() + expires_in},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )


@pytest.fixture
def bearer_headers():
    """Factory: bearer headers for an identity, optionally with a role-session token."""

    def _headers(identity_id: str, session_token: str | None = None) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {make_bearer_token(identity_id)}"}
        if session_token is not None:
            headers[get_settings().role_session_header] = session_token
        return headers

    return _headers


@pytest.fixture
def make_grant(file_session_factory):
    """Factory: commit a grant (with the role type's default permissions) to the API database."""

    async def _make(
        identity_id: str,
        role_type: str,
        organization_type: str,
        organization_id: str | None = None,
        *,
        is_primary: bool = False,
    ):
        async with file_session_factory() as session:
            async with session.begin():
                return await RoleGrantRepository(session).create_grant(
                    identity_id,
                    role_type,
                    organization_type,
                    organization_id,
                    default_permissions_for(role_type),
                    is_primary=is_primary,
                )

    return _make
