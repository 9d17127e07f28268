"""
Credential lifecycle: expiry, malformed tokens and deleted principals
"""
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy import delete

from hrms.auth.security import TokenService
from hrms.db.models import User


def issue_for(app: FastAPI, user: dict, issued_at: datetime) -> str:
    tokens: TokenService = app.state.context.tokens
    return tokens.issue(
        user_id=user["id"],
        organisation_id="ignored-claim",
        email=user["email"],
        role=user["role"],
        now=issued_at,
    )


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestCredentialLifecycle:

    async def test_token_valid_one_minute_after_issue(self, app: FastAPI, client: AsyncClient, acme):
        token = issue_for(app, acme["user"], datetime.now(timezone.utc) - timedelta(minutes=1))

        response = await client.get("/api/auth/profile", headers=bearer(token))
        assert response.status_code == 200

    async def test_token_expired_after_twenty_five_hours(self, app: FastAPI, client: AsyncClient, acme):
        token = issue_for(app, acme["user"], datetime.now(timezone.utc) - timedelta(hours=25))

        response = await client.get("/api/auth/profile", headers=bearer(token))
        assert response.status_code == 403
        assert response.json() == {"error": "Token expired"}

    async def test_principal_resolved_from_store_not_claims(self, app: FastAPI, client: AsyncClient, acme):
        token = issue_for(app, acme["user"], datetime.now(timezone.utc))

        response = await client.get("/api/auth/profile", headers=bearer(token))
        assert response.json()["user"]["organisation_id"] != "ignored-claim"

    async def test_deleted_user_rejected_before_expiry(self, app: FastAPI, client: AsyncClient, acme):
        async with app.state.context.database.session_factory() as session:
            await session.execute(delete(User).where(User.id == acme["user"]["id"]))
            await session.commit()

        response = await client.get("/api/employees", headers=acme["headers"])
        assert response.status_code == 401
        assert response.json() == {"error": "User not found"}


class TestMalformedCredentials:

    async def test_missing_header(self, client: AsyncClient):
        response = await client.get("/api/employees")

        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}

    async def test_non_bearer_scheme(self, client: AsyncClient):
        response = await client.get("/api/employees", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/employees", headers=bearer("not.a.token"))

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}

    async def test_token_signed_with_another_secret(self, client: AsyncClient, acme):
        forged = TokenService(secret_key="someone-elses-secret").issue(
            user_id=acme["user"]["id"],
            organisation_id="x",
            email=acme["user"]["email"],
            role="admin",
        )

        response = await client.get("/api/employees", headers=bearer(forged))
        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}


class TestTokenService:

    def test_claims(self):
        service = TokenService(secret_key="k")
        token = service.issue(user_id="u1", organisation_id="o1", email="a@b.com", role="admin")

        claims = service.decode(token)
        assert claims["user_id"] == "u1"
        assert claims["organisation_id"] == "o1"
        assert claims["email"] == "a@b.com"
        assert claims["role"] == "admin"
        assert claims["exp"] - claims["iat"] == 24 * 60 * 60
