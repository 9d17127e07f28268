"""
Audit trail: durability under failure, querying and statistics
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from hrms.auth.dependencies import get_audit_recorder
from hrms.exceptions.errors import StorageError
from hrms.services.audit import AuditRecorder, RequestMeta
from hrms.services.identity import Principal

from conftest import create_employee, create_team


class UnavailableGateway:
    """Gateway double whose every write fails"""

    def __init__(self):
        self.attempts = 0

    async def run(self, stmt):
        self.attempts += 1
        raise StorageError("audit store unavailable")


class TestAuditDurability:

    async def test_mutation_succeeds_when_audit_write_fails(self, app: FastAPI, client: AsyncClient, acme):
        gateway = UnavailableGateway()
        app.dependency_overrides[get_audit_recorder] = lambda: AuditRecorder(gateway)

        response = await client.post("/api/employees", json={
            "first_name": "Jo",
            "last_name": "Doe",
            "email": "jo@acme.com",
        }, headers=acme["headers"])

        assert response.status_code == 201
        assert gateway.attempts == 1

        rows = (await client.get("/api/employees", headers=acme["headers"])).json()
        assert [r["id"] for r in rows] == [response.json()["id"]]

        app.dependency_overrides.clear()
        logs = (await client.get(
            "/api/audit/logs", params={"resource_type": "EMPLOYEE"}, headers=acme["headers"]
        )).json()
        assert logs["pagination"]["total"] == 0

    async def test_recorder_never_raises(self):
        recorder = AuditRecorder(UnavailableGateway())
        principal = Principal(
            user_id="u", organisation_id="o", email="a@b.com", name="A", role="admin", organisation_name="Org",
        )

        await recorder.record("CREATE", "EMPLOYEE", "e1", {"k": "v"}, principal, RequestMeta())

    async def test_request_metadata_recorded(self, client: AsyncClient, acme):
        await client.post("/api/employees", json={
            "first_name": "Jo",
            "last_name": "Doe",
            "email": "jo@acme.com",
        }, headers={**acme["headers"], "User-Agent": "hr-portal/1.0", "X-Forwarded-For": "203.0.113.7"})

        entry = (await client.get(
            "/api/audit/logs", params={"resource_type": "EMPLOYEE"}, headers=acme["headers"]
        )).json()["logs"][0]
        assert entry["user_agent"] == "hr-portal/1.0"
        assert entry["ip_address"] == "203.0.113.7"
        assert entry["user_name"] == "Alice Admin"
        assert entry["user_email"] == "a@acme.com"
        assert entry["details"]["email"] == "jo@acme.com"


@pytest.fixture
async def activity(client: AsyncClient, acme) -> dict:
    """Registration plus five mutations: 3 CREATE, 1 ASSIGN, 1 UPDATE"""
    employee_id = await create_employee(client, acme["headers"])
    other_id = await create_employee(client, acme["headers"], email="sam@acme.com", first_name="Sam")
    team_id = await create_team(client, acme["headers"])
    await client.post(f"/api/employees/{employee_id}/teams/{team_id}", headers=acme["headers"])
    await client.put(f"/api/teams/{team_id}", json={"name": "Engineering"}, headers=acme["headers"])
    return {"employee_id": employee_id, "other_id": other_id, "team_id": team_id}


class TestAuditQuery:

    async def test_newest_first(self, client: AsyncClient, acme, activity):
        data = (await client.get("/api/audit/logs", headers=acme["headers"])).json()

        actions = [entry["action"] for entry in data["logs"]]
        assert actions == ["UPDATE", "ASSIGN", "CREATE", "CREATE", "CREATE", "CREATE"]
        assert data["logs"][-1]["resource_type"] == "ORGANISATION"
        assert data["pagination"] == {"page": 1, "limit": 50, "total": 6, "pages": 1}

    async def test_filters_are_and_combined(self, client: AsyncClient, acme, activity):
        data = (await client.get(
            "/api/audit/logs", params={"action": "CREATE", "resource_type": "EMPLOYEE"}, headers=acme["headers"]
        )).json()

        assert data["pagination"]["total"] == 2
        assert {entry["resource_id"] for entry in data["logs"]} == {activity["employee_id"], activity["other_id"]}

    async def test_pagination(self, client: AsyncClient, acme, activity):
        first = (await client.get("/api/audit/logs", params={"limit": 4}, headers=acme["headers"])).json()
        second = (await client.get(
            "/api/audit/logs", params={"limit": 4, "page": 2}, headers=acme["headers"]
        )).json()

        assert len(first["logs"]) == 4
        assert len(second["logs"]) == 2
        assert second["pagination"] == {"page": 2, "limit": 4, "total": 6, "pages": 2}
        assert not {e["id"] for e in first["logs"]} & {e["id"] for e in second["logs"]}

    async def test_date_bounds(self, client: AsyncClient, acme, activity):
        future = (datetime.now(timezone.utc) + timedelta(days=1)).replace(tzinfo=None).isoformat()
        past = (datetime.now(timezone.utc) - timedelta(days=1)).replace(tzinfo=None).isoformat()

        after = (await client.get("/api/audit/logs", params={"start_date": future}, headers=acme["headers"])).json()
        before = (await client.get("/api/audit/logs", params={"end_date": past}, headers=acme["headers"])).json()
        window = (await client.get(
            "/api/audit/logs", params={"start_date": past, "end_date": future}, headers=acme["headers"]
        )).json()

        assert after["pagination"]["total"] == 0
        assert before["pagination"]["total"] == 0
        assert window["pagination"]["total"] == 6

    async def test_invalid_page(self, client: AsyncClient, acme):
        response = await client.get("/api/audit/logs", params={"page": 0}, headers=acme["headers"])

        assert response.status_code == 400

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get("/api/audit/logs")

        assert response.status_code == 401


class TestAuditStats:

    async def test_counts(self, client: AsyncClient, acme, activity):
        stats = (await client.get("/api/audit/stats", headers=acme["headers"])).json()

        assert stats["action_stats"][0] == {"action": "CREATE", "count": 4}
        assert {s["action"]: s["count"] for s in stats["action_stats"]} == {"CREATE": 4, "ASSIGN": 1, "UPDATE": 1}
        assert {s["resource_type"]: s["count"] for s in stats["resource_stats"]} == {
            "ORGANISATION": 1,
            "EMPLOYEE": 2,
            "TEAM": 2,
            "EMPLOYEE_TEAM": 1,
        }

    async def test_daily_activity(self, client: AsyncClient, acme, activity):
        stats = (await client.get("/api/audit/stats", headers=acme["headers"])).json()

        assert len(stats["daily_activity"]) == 1
        assert stats["daily_activity"][0]["count"] == 6
        assert stats["daily_activity"][0]["date"] == datetime.now(timezone.utc).date().isoformat()

    async def test_stats_respect_date_bounds(self, client: AsyncClient, acme, activity):
        future = (datetime.now(timezone.utc) + timedelta(days=1)).replace(tzinfo=None).isoformat()

        stats = (await client.get("/api/audit/stats", params={"start_date": future}, headers=acme["headers"])).json()

        assert stats == {"action_stats": [], "resource_stats": [], "daily_activity": []}
