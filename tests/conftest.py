import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.api.dependencies import get_user_registrar
from app.core.security import hash_password
from app.db.base import Base
from app.db.models import User, UserRole, UserStatus
from app.db.session import get_db
from app.main import app


DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    engine = create_async_engine(DATABASE_URL, echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def existing_user(db_session):
    user = User(
        name="Demo Trader",
        email="trader@example.com",
        password_hash=hash_password("Admin123!"),
        role=UserRole.TRADER,
        status=UserStatus.ACTIVE,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


class RecordingRegistrar:
    """Stand-in user store that records every call it receives."""

    def __init__(self, error=None, result=None):
        self.error = error
        self.result = result
        self.calls = []

    async def __call__(self, name, email, password, role):
        self.calls.append({"name": name, "email": email, "password": password, "role": role})
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return SimpleNamespace(id="usr_0001", name=name, email=email, role=role)


@pytest.fixture
def registrar():
    return RecordingRegistrar()


@pytest.fixture
async def client(db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def fake_client(registrar):
    app.dependency_overrides[get_user_registrar] = lambda: registrar
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_registrar():
    return RecordingRegistrar
