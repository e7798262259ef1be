import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from database import Base
from main import app
from routers import rate_limit
from services.passwords import hash_password
from services.session_token import create_session_token
from services.storage import MemoryStorage, SqlStorage


DEFAULT_VIDEO = {
    "title": "Intro",
    "description": "12+ chars description",
    "url": "https://youtube.com/watch?v=abc12345678",
    "embedType": "youtube",
    "thumbnail": "https://x/y.png",
    "duration": "5:00",
    "category": "Frontend Development",
    "difficulty": "beginner",
    "tags": ["react"],
}


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest_asyncio.fixture(params=["memory", "database"])
async def storage(request, tmp_path):
    if request.param == "memory":
        yield MemoryStorage()
        return

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'codecast.db'}")
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlStorage(session_maker)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(storage):
    previous = getattr(app.state, "storage", None)
    app.state.storage = storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as api_client:
        yield api_client
    app.state.storage = previous


@pytest.fixture
def register(client):
    """Register through the API and return (user, auth headers)."""

    async def _register(username: str, role: str = "viewer", password: str = "secret123", email: str = None):
        response = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@codecast.dev",
                "password": password,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest_asyncio.fixture
async def admin(storage):
    """Admins cannot self-register; create one directly in storage."""
    user = await storage.create_user(
        username="root",
        email="root@codecast.dev",
        password_hash=hash_password("rootpass"),
        role="admin",
    )
    token = create_session_token(user.id, user.role)["token"]
    return user, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_video(client):
    async def _create(headers, **overrides):
        payload = dict(DEFAULT_VIDEO)
        payload.update(overrides)
        response = await client.post("/api/videos", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
