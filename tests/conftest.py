"""
Pytest configuration and fixtures for HRMS API tests
"""
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from hrms.core.config import Settings
from hrms.main import create_app

DEFAULT_PASSWORD = "secret1"


def make_settings(**overrides) -> Settings:
    """Isolated in-memory database, cheap bcrypt, no rate limiting"""
    values = {
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "JWT_SECRET_KEY": "test-secret-key",
        "BCRYPT_ROUNDS": 4,
        "ENVIRONMENT": "test",
        "ENABLE_JSON_LOGGING": False,
        "RATE_LIMIT_ENABLED": False,
        "CREATE_TABLES_ON_STARTUP": False,
        "CORS_ORIGINS": "http://localhost:3000",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Fresh application and schema for each test"""
    application = create_app(settings)
    await application.state.context.database.create_all()
    yield application
    application.dependency_overrides.clear()
    await application.state.context.database.dispose()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def register_org(
        client: AsyncClient,
        organisation_name: str,
        email: str,
        password: str = DEFAULT_PASSWORD,
        name: str = "Admin User",
) -> dict:
    """Register an organisation and return its token, user and auth headers"""
    response = await client.post("/api/auth/register", json={
        "organisation_name": organisation_name,
        "email": email,
        "password": password,
        "name": name,
    })
    assert response.status_code == 201, response.text
    data = response.json()
    data["headers"] = {"Authorization": f"Bearer {data['token']}"}
    return data


async def create_employee(client: AsyncClient, headers: dict, **fields) -> str:
    payload = {"first_name": "Jo", "last_name": "Doe", "email": "jo@acme.com"}
    payload.update(fields)
    response = await client.post("/api/employees", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def create_team(client: AsyncClient, headers: dict, name: str = "Eng", **fields) -> str:
    response = await client.post("/api/teams", json={"name": name, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


@pytest.fixture
async def acme(client: AsyncClient) -> dict:
    return await register_org(client, "Acme", "a@acme.com", name="Alice Admin")


@pytest.fixture
async def globex(client: AsyncClient) -> dict:
    return await register_org(client, "Globex", "b@globex.com", name="Bob Admin")
