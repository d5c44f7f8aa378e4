"""
Test fixtures
"""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from book_api.core.database import create_session_factory, create_tables, get_db
from book_api.main import app

BASE_URL = "http://test"

# In-memory SQLite shared through a single connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_PASSWORD = "Test1234!"

ORWELL = {"name": "George Orwell", "bio": "English novelist", "dateOfBirth": "1903-06-25"}
HUXLEY = {"name": "Aldous Huxley", "bio": "English writer", "dateOfBirth": "1894-07-26"}


@pytest.fixture
async def test_engine():
    """Fresh database for every test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def async_session(async_session_maker):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
async def async_client(async_session_maker):
    """HTTP client bound to the application with the test database"""

    async def override_get_db():
        async with async_session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user_with_token(async_client: AsyncClient) -> dict:
    """Registers a user and returns its credentials and token"""
    email = f"test_user_{uuid.uuid4().hex[:8]}@example.com"
    response = await async_client.post(
        "/api/auth/register",
        json={"email": email, "password": TEST_PASSWORD, "fullName": "Test User"},
    )
    assert response.status_code == 200, f"Registration failed: {response.text}"
    return {"email": email, "password": TEST_PASSWORD, "token": response.json()["token"]}


@pytest.fixture
def auth_headers(test_user_with_token: dict) -> dict:
    return {"Authorization": f"Bearer {test_user_with_token['token']}"}


@pytest.fixture
async def author(async_client: AsyncClient, auth_headers: dict) -> dict:
    """An author created through the API"""
    response = await async_client.post("/api/authors", json=ORWELL, headers=auth_headers)
    assert response.status_code == 201, f"Author creation failed: {response.text}"
    return response.json()


@pytest.fixture
async def book(async_client: AsyncClient, auth_headers: dict, author: dict) -> dict:
    """A book of ``author`` created through the nested route"""
    response = await async_client.post(
        f"/api/authors/{author['id']}/books",
        json={"title": "1984", "publishDate": "1949-06-08"},
        headers=auth_headers,
    )
    assert response.status_code == 201, f"Book creation failed: {response.text}"
    return response.json()
