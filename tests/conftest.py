import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pomotrack.database import get_db
from pomotrack.dependencies import get_current_user
from pomotrack.main import app
from pomotrack.models import Base
from pomotrack.models.user import User
from pomotrack.services.auth_service import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "TestPass123!"


class FakePipeline:
    """Queues sorted-set commands and runs them on execute()."""

    def __init__(self, redis: "FakeRedis"):
        self._redis = redis
        self._ops: list = []

    def zremrangebyscore(self, key: str, low: float, high: float):
        self._ops.append(lambda: self._redis.zremrangebyscore(key, low, high))

    def zadd(self, key: str, mapping: dict[str, float]):
        self._ops.append(lambda: self._redis.zadd(key, mapping))

    def zcard(self, key: str):
        self._ops.append(lambda: self._redis.zcard(key))

    def expire(self, key: str, seconds: int):
        self._ops.append(lambda: self._redis.set_ttl(key, seconds))

    async def execute(self) -> list:
        return [op() for op in self._ops]


class FakeRedis:
    """In-memory Redis mock for testing."""

    def __init__(self):
        self._store: dict[str, str] = {}
        self._zsets: dict[str, dict[str, float]] = {}
        self._ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._store[key] = str(value)
        if ex:
            self._ttls[key] = ex

    async def setex(self, key: str, seconds: int, value: str) -> None:
        await self.set(key, value, ex=seconds)

    async def incr(self, key: str) -> int:
        val = int(self._store.get(key, "0")) + 1
        self._store[key] = str(val)
        return val

    async def expire(self, key: str, seconds: int) -> None:
        self.set_ttl(key, seconds)

    def set_ttl(self, key: str, seconds: int) -> bool:
        self._ttls[key] = seconds
        return True

    def zremrangebyscore(self, key: str, low: float, high: float) -> int:
        zset = self._zsets.setdefault(key, {})
        stale = [member for member, score in zset.items() if low <= score <= high]
        for member in stale:
            del zset[member]
        return len(stale)

    def zadd(self, key: str, mapping: dict[str, float]) -> int:
        zset = self._zsets.setdefault(key, {})
        added = len(set(mapping) - set(zset))
        zset.update(mapping)
        return added

    def zcard(self, key: str) -> int:
        return len(self._zsets.get(key, {}))

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


async def _make_user(db_session: AsyncSession, username: str, email: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "tester", "test@example.com")


@pytest.fixture
async def second_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "friend", "friend@example.com")


def _override_db(db_engine):
    session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


@pytest.fixture
async def client(db_engine, test_user: User) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = _override_db(db_engine)
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.state.redis = FakeRedis()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through real bearer-token authentication."""
    app.dependency_overrides[get_db] = _override_db(db_engine)
    app.state.redis = FakeRedis()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def raw_client(client) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client that returns 500 responses instead of raising."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
