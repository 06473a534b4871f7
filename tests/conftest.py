"""Test configuration and fixtures."""
import json
from base64 import b64encode
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from itsdangerous import TimestampSigner
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from isucondition.core.config import Settings, get_settings
from isucondition.db.base import Base
from isucondition.deps import get_app_settings, get_db_session, get_jia_client
from isucondition.main import app
from isucondition.models.entities import Isu, User
from isucondition.services.jia import JIAClient

TARGET_BASE_URL = "http://isucondition.test"
JIA_SERVICE_URL = "http://jia.test"


def make_session_cookie(data: dict) -> str:
    """Sign a session payload the way starlette's SessionMiddleware does."""
    signer = TimestampSigner(str(get_settings().session_secret_key))
    return signer.sign(b64encode(json.dumps(data).encode("utf-8"))).decode("utf-8")


@pytest_asyncio.fixture
async def test_db():
    """Create a test database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield async_session_maker

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_db) -> AsyncGenerator[AsyncSession, None]:
    """Get a test database session."""
    async with test_db() as session:
        yield session


@pytest.fixture
def jia_service():
    """Scripted JIA activation endpoint; records every request it receives."""
    state = {"status": 202, "character": "いじっぱり", "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        if state["status"] != 202:
            return httpx.Response(state["status"], text="isu is not found")
        return httpx.Response(202, json={"character": state["character"]})

    state["client"] = JIAClient(transport=httpx.MockTransport(handler))
    return state


@pytest_asyncio.fixture
async def client(test_db, jia_service) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database, settings and JIA overrides."""

    async def override_get_db():
        async with test_db() as session:
            yield session

    def override_get_settings():
        return Settings(
            post_isucondition_target_base_url=TARGET_BASE_URL,
            default_jia_service_url=JIA_SERVICE_URL,
        )

    async def override_get_jia_client():
        yield jia_service["client"]

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_app_settings] = override_get_settings
    app.dependency_overrides[get_jia_client] = override_get_jia_client

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    await jia_service["client"].close()


@pytest_asyncio.fixture
async def regular_user(db_session: AsyncSession) -> User:
    user = User(jia_user_id="isucon")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def another_user(db_session: AsyncSession) -> User:
    user = User(jia_user_id="isucon2")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def sign_in():
    """Attach a signed session cookie naming ``jia_user_id`` to a client."""

    def _sign_in(client: AsyncClient, jia_user_id: str) -> AsyncClient:
        cookie = make_session_cookie({"jia_user_id": jia_user_id})
        client.headers["Cookie"] = f"{get_settings().session_cookie}={cookie}"
        return client

    return _sign_in


@pytest_asyncio.fixture
async def user_client(client: AsyncClient, regular_user: User, sign_in) -> AsyncClient:
    """Client whose session cookie names ``regular_user``."""
    return sign_in(client, regular_user.jia_user_id)


@pytest_asyncio.fixture
async def owned_isu(db_session: AsyncSession, regular_user: User) -> Isu:
    isu = Isu(
        jia_isu_uuid="0694e4d7-dfce-4aec-b7ca-887ac42cfb8f",
        name="Test Isu",
        image=b"\x89PNG-test",
        character="いじっぱり",
        jia_user_id=regular_user.jia_user_id,
    )
    db_session.add(isu)
    await db_session.commit()
    await db_session.refresh(isu)
    return isu
