"""
Pytest fixtures.

Every test gets its own SQLite file, so nothing leaks between tests. Router
tests go through the real app with `get_db` pointed at that file and real
bearer tokens.
"""
import os

os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from mindcare.db import Base, get_db
from mindcare.main import app
from mindcare.models import User, Achievement, Therapy
from mindcare.services.auth_service import create_access_token, hash_password
from mindcare.services.key_value_store import InMemoryKeyValueStore


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def _get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


async def _make_user(db, email, role):
    user = User(email=email, password_hash=hash_password("password123"), role=role, name=email.split("@")[0])
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def user(db):
    return await _make_user(db, "patient@example.com", "user")


@pytest.fixture
async def admin(db):
    return await _make_user(db, "admin@example.com", "admin")


def bearer(user):
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(user):
    return bearer(user)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
async def catalog(db):
    """A small achievement catalog covering every type."""
    rows = [
        Achievement(title="Week Warrior", description="", type="streak", requirement=7),
        Achievement(title="Mood Tracker", description="", type="mood", requirement=5),
        Achievement(title="Stress Buster", description="", type="stress", requirement=2),
        Achievement(title="Mindful meditation", description="", type="therapy", requirement=5,
                    metric="mindfulness_sessions"),
        Achievement(title="Program Graduate", description="", type="therapy", requirement=5,
                    metric="completed_modules"),
        Achievement(title="Early Riser", description="", type="therapy", requirement=5,
                    metric="morning_meditations"),
        Achievement(title="Therapy Explorer", description="", type="therapy", requirement=10),
    ]
    db.add_all(rows)
    await db.commit()
    return {a.title: a for a in rows}


@pytest.fixture
async def therapy(db):
    t = Therapy(
        id="cbt",
        title="Cognitive Behavioral Therapy",
        description="Identify and reframe unhelpful thoughts.",
        duration="15-30 min",
        sessions=8,
        difficulty="Beginner",
        category="CBT",
        icon="Brain",
        color="from-blue-500 to-cyan-500",
        tags=["anxiety", "depression"],
        status="Active",
    )
    db.add(t)
    await db.commit()
    return t
