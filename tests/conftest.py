"""
Pytest fixtures for protoid tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from protoid.config import Settings
from protoid.database import create_engine, create_session_maker, init_db
from protoid.kernel.identity.identity_service import IdentityService
from protoid.kernel.identity.password import PasswordHasher
from protoid.kernel.identity.tokens import SessionTokenIssuer
from protoid.schemas.identity import Identity
from tests.helpers.fakes import InMemoryIdentityRepository

# bcrypt's minimum cost keeps the suite fast
TEST_ROUNDS = 4

TEST_PASSWORD = "TestPassword123"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        bcrypt_rounds=TEST_ROUNDS,
        session_token_seed="test-seed-for-testing-only",
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def token_issuer(hasher: PasswordHasher) -> SessionTokenIssuer:
    return SessionTokenIssuer(hasher=hasher, seed="test-seed-for-testing-only")


@pytest.fixture
def repository() -> InMemoryIdentityRepository:
    return InMemoryIdentityRepository()


@pytest.fixture
def service(repository: InMemoryIdentityRepository, settings: Settings) -> IdentityService:
    """Identity service over the in-memory repository."""
    return IdentityService(repository, settings=settings)


@pytest_asyncio.fixture
async def registered_identity(service: IdentityService) -> Identity:
    """A fully registered identity with an active session."""
    return await service.register({
        "email": "testuser@example.com",
        "password": TEST_PASSWORD,
        "name": "Test User",
    })


@pytest_asyncio.fixture
async def proto_identity(service: IdentityService) -> Identity:
    """An anonymous identity waiting to be claimed."""
    return await service.register_proto({"prototoken": "device-abc-123"})


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-based SQLite engine so every connection sees the same database."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'identities.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session against the test database."""
    async with create_session_maker(db_engine)() as session:
        yield session
