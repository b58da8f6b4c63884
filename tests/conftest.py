import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pomodoro_api.analytics import SessionRecord
from pomodoro_api.database import get_db
from pomodoro_api.dependencies import get_current_user
from pomodoro_api.main import app
from pomodoro_api.models import Base
from pomodoro_api.models.user import User

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Wednesday
NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


def make_record(
    days_ago: int = 0,
    hour: int = 10,
    minutes: float = 25,
    completed: bool = True,
    now: datetime = NOW,
    **overrides,
) -> SessionRecord:
    """Session record starting ``days_ago`` days before ``now`` at ``hour``."""
    start = now.replace(hour=hour, minute=0, second=0, microsecond=0) - timedelta(days=days_ago)
    fields = {
        "id": uuid.uuid4(),
        "user_id": "user-1",
        "start_time": start,
        "duration_minutes": minutes,
        "completed": completed,
        "task": "Completed Pomodoro",
    }
    fields.update(overrides)
    return SessionRecord(**fields)


class FakePipeline:
    def __init__(self, redis: "FakeRedis"):
        self._redis = redis
        self._ops: list = []

    def zremrangebyscore(self, key: str, lo: float, hi: float):
        self._ops.append(lambda: self._redis.zremrangebyscore(key, lo, hi))

    def zadd(self, key: str, mapping: dict[str, float]):
        self._ops.append(lambda: self._redis.zadd(key, mapping))

    def zcard(self, key: str):
        self._ops.append(lambda: self._redis.zcard(key))

    def expire(self, key: str, seconds: int):
        self._ops.append(lambda: self._redis.expire_now(key, seconds))

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

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self)

    def zremrangebyscore(self, key: str, lo: float, hi: float) -> int:
        zset = self._zsets.get(key, {})
        stale = [m for m, score in zset.items() if lo <= score <= hi]
        for member in stale:
            del zset[member]
        return len(stale)

    def zadd(self, key: str, mapping: dict[str, float]) -> int:
        self._zsets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def zcard(self, key: str) -> int:
        return len(self._zsets.get(key, {}))

    def expire_now(self, key: str, seconds: int) -> bool:
        self._ttls[key] = seconds
        return True

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
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


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(
        id=uuid.uuid4(),
        email="test@example.com",
        username="tester",
        auth_provider="local",
        auth_provider_id="local_test_123",
        settings_json={"pomodoro_minutes": 25},
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


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
async def anon_client(db_engine, test_user: User) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through real bearer-token authentication."""
    app.dependency_overrides[get_db] = _override_db(db_engine)
    app.state.redis = None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
