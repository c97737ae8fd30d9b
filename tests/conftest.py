"""
Shared fixtures: an in-memory SQLite database, the service chain built on
it, and an HTTP client for the app.
"""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from auth.guard import AuthGuard
from auth.jwt import TokenCodec
from auth.password import PasswordHasher
from config.settings import Settings
from database.session import build_session_factory, init_db
from database.user_store import UserStore
from main import create_app
from services.auth_service import AuthService
from services.directory import UserDirectory

TEST_SECRET = "test-jwt-secret-for-testing-only"
TEST_ROUNDS = 4  # bcrypt minimum, keeps the suite fast


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_SECRET,
        jwt_expiry_seconds=3600,
        bcrypt_rounds=TEST_ROUNDS,
        create_tables_on_startup=False,
        debug=False,
    )


@pytest_asyncio.fixture
async def engine():
    """One shared in-memory connection so every session sees the same tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET, expiry_seconds=3600)


@pytest.fixture
def store(session) -> UserStore:
    return UserStore(session)


@pytest.fixture
def directory(store, hasher) -> UserDirectory:
    return UserDirectory(store, hasher)


@pytest.fixture
def auth_service(directory, hasher, codec) -> AuthService:
    return AuthService(directory, hasher, codec)


@pytest.fixture
def guard(codec, directory) -> AuthGuard:
    return AuthGuard(codec, directory)


@pytest.fixture
def app(settings, session_factory):
    return create_app(settings=settings, session_factory=session_factory)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
