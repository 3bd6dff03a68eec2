"""
LAMPY Backend - Test Configuration (conftest.py)
================================================

Fixture Hierarchy (all function-scoped):
    test_settings   Settings pointing at a throwaway SQLite file and uploads dir
    └── app         create_app(test_settings) with tables created
        └── client  httpx AsyncClient over ASGITransport
            ├── register_user       factory: POST /auth/register → (token, user)
            └── create_counsellor   factory: POST /admin/counsellors → counsellor

    mock_db_session   AsyncMock standing in for AsyncSession in service unit tests

ASGITransport does not run the lifespan, so the `app` fixture creates the
tables and disposes the engine itself.
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lampy.config import Settings
from lampy.main import create_app

API = "/api/v1"
TEST_JWT_SECRET = "test-secret-that-is-long-enough-for-hs256-signing"
TEST_PASSWORD = "s3cret-pass"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'lampy_test.db'}",
        upload_root=str(tmp_path / "uploads"),
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        rate_limit_requests=0,
        log_level="WARNING",
        api_prefix=API,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def register_user(client):
    """
    Usage:
        token, user = await register_user("ann@example.com")
    """
    async def _register(email: str = "ann@example.com", name: str = "Ann", password: str = TEST_PASSWORD):
        response = await client.post(
            f"{API}/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def create_counsellor(client):
    """
    Usage:
        counsellor = await create_counsellor(name="Dr. Rao", rating=4.5)
    """
    async def _create(**overrides):
        payload = {
            "name": "Dr. Meera Rao",
            "role": "Clinical Psychologist",
            "experience": "8 years",
            "qualification": "M.Phil Clinical Psychology",
            "price": "₹1000",
            "rating": 4.0,
            "total_ratings": 12,
            "image_url": "/static/rao.jpg",
            "specialties": ["Anxiety", "Stress Management"],
            "available": True,
        }
        payload.update(overrides)
        response = await client.post(f"{API}/admin/counsellors", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def mock_db_session():
    """AsyncSession stand-in for service unit tests."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Smallest JPEG-looking payload: SOI + JFIF header + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )
