"""
Cross-cutting HTTP behaviour: headers, tracing, CORS, error shape, health, metrics, rate limits
"""
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from hrms.api.dependencies import get_employee_manager
from hrms.exceptions.errors import StorageError
from hrms.main import create_app
from hrms.services.audit import AuditRecorder
from hrms.services.employees import EmployeeManager

from conftest import make_settings


class FailingGateway:
    async def get_many(self, stmt):
        raise StorageError("connection reset by peer")

    async def get_one(self, stmt):
        raise StorageError("connection reset by peer")

    async def run(self, stmt):
        raise StorageError("connection reset by peer")


class TestSecurityHeaders:

    async def test_headers_present(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "no-referrer"
        assert "content-security-policy" in response.headers

    async def test_headers_on_errors(self, client: AsyncClient):
        response = await client.get("/api/employees")

        assert response.status_code == 401
        assert response.headers["x-content-type-options"] == "nosniff"


class TestTracing:

    async def test_trace_id_generated(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert len(response.headers["x-trace-id"]) == 32

    async def test_incoming_trace_id_echoed(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Trace-ID": "abc123"})

        assert response.headers["x-trace-id"] == "abc123"


class TestCORS:

    async def test_disallowed_origin(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"Origin": "https://evil.example"})

        assert response.status_code == 403
        assert response.json() == {"error": "CORS policy violation"}

    async def test_allowed_origin(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"Origin": "http://localhost:3000"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    async def test_no_origin_passes(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200


class TestErrorShape:

    async def test_unknown_api_endpoint(self, client: AsyncClient):
        response = await client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "API endpoint not found"}

    async def test_malformed_json_body(self, client: AsyncClient, acme):
        response = await client.post(
            "/api/employees",
            content=b"{not json",
            headers={**acme["headers"], "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert set(response.json()) == {"error"}

    async def test_storage_failure_hides_details(self, app: FastAPI, client: AsyncClient, acme):
        app.dependency_overrides[get_employee_manager] = lambda: EmployeeManager(
            FailingGateway(), AuditRecorder(FailingGateway())
        )

        response = await client.get("/api/employees", headers=acme["headers"])

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    async def test_storage_failure_details_in_development(self):
        app = create_app(make_settings(ENVIRONMENT="development"))
        await app.state.context.database.create_all()
        app.dependency_overrides[get_employee_manager] = lambda: EmployeeManager(
            FailingGateway(), AuditRecorder(FailingGateway())
        )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            registered = await client.post("/api/auth/register", json={
                "organisation_name": "Acme",
                "email": "a@acme.com",
                "password": "secret1",
                "name": "Alice Admin",
            })
            token = registered.json()["token"]
            response = await client.get("/api/employees", headers={"Authorization": f"Bearer {token}"})

        await app.state.context.database.dispose()
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert "connection reset by peer" in response.json()["details"]


class TestSystemEndpoints:

    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["database"] == "connected"
        assert data["service"] == "HRMS Backend API"
        assert data["timestamp"]

    async def test_health_reports_database_outage(self, app: FastAPI, client: AsyncClient):
        async def broken_ping():
            raise ConnectionError("database unreachable")

        app.state.context.database.ping = broken_ping
        response = await client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "ERROR"

    async def test_metrics(self, client: AsyncClient):
        await client.get("/api/health")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "hrms_http_requests_total" in response.text


class TestRateLimiting:

    @staticmethod
    def limited_app(limit: str) -> FastAPI:
        return create_app(make_settings(RATE_LIMIT_ENABLED=True, DEFAULT_RATE_LIMIT=limit))

    async def test_limit_exceeded(self):
        app = self.limited_app("2 per minute")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get("/api/health")).status_code for _ in range(2)]
            limited = await client.get("/api/health")

        await app.state.context.database.dispose()
        assert statuses == [200, 200]
        assert limited.status_code == 429
        assert limited.json() == {"error": "Too many requests from this IP, please try again later."}

    async def test_budget_is_shared_across_routes_and_checked_before_auth(self):
        app = self.limited_app("3 per minute")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get("/api/teams")).status_code for _ in range(3)]
            limited = await client.get("/api/employees")

        await app.state.context.database.dispose()
        assert statuses == [401, 401, 401]
        assert limited.status_code == 429

    async def test_disabled_limit_never_fires(self):
        app = create_app(make_settings(DEFAULT_RATE_LIMIT="1 per minute"))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get("/api/health")).status_code for _ in range(3)]

        await app.state.context.database.dispose()
        assert statuses == [200, 200, 200]
