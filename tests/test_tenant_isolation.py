"""
No organisation can see or touch another organisation's data, even with known ids
"""
from httpx import AsyncClient

from conftest import create_employee, create_team


class TestTenantIsolation:

    async def test_lists_are_scoped(self, client: AsyncClient, acme, globex):
        await create_employee(client, acme["headers"])
        await create_team(client, acme["headers"])

        assert (await client.get("/api/employees", headers=globex["headers"])).json() == []
        assert (await client.get("/api/teams", headers=globex["headers"])).json() == []

    async def test_foreign_employee_is_not_found(self, client: AsyncClient, acme, globex):
        employee_id = await create_employee(client, acme["headers"])

        update = await client.put(f"/api/employees/{employee_id}", json={
            "first_name": "Mallory",
            "last_name": "Doe",
            "email": "mallory@globex.com",
        }, headers=globex["headers"])
        delete = await client.delete(f"/api/employees/{employee_id}", headers=globex["headers"])

        assert update.status_code == 404
        assert update.json() == {"error": "Employee not found"}
        assert delete.status_code == 404

        # Untouched for the owner
        row = (await client.get("/api/employees", headers=acme["headers"])).json()[0]
        assert row["first_name"] == "Jo"

    async def test_foreign_team_is_not_found(self, client: AsyncClient, acme, globex):
        team_id = await create_team(client, acme["headers"])

        update = await client.put(f"/api/teams/{team_id}", json={"name": "Hijacked"}, headers=globex["headers"])
        delete = await client.delete(f"/api/teams/{team_id}", headers=globex["headers"])
        members = await client.get(f"/api/teams/{team_id}/members", headers=globex["headers"])

        assert update.status_code == 404
        assert delete.status_code == 404
        assert members.status_code == 404

    async def test_cannot_assign_across_tenants(self, client: AsyncClient, acme, globex):
        acme_employee = await create_employee(client, acme["headers"])
        globex_team = await create_team(client, globex["headers"])

        as_globex = await client.post(
            f"/api/employees/{acme_employee}/teams/{globex_team}", headers=globex["headers"]
        )
        as_acme = await client.post(
            f"/api/employees/{acme_employee}/teams/{globex_team}", headers=acme["headers"]
        )

        assert as_globex.status_code == 404
        assert as_acme.status_code == 404

    async def test_cannot_unassign_foreign_membership(self, client: AsyncClient, acme, globex):
        employee_id = await create_employee(client, acme["headers"])
        team_id = await create_team(client, acme["headers"])
        await client.post(f"/api/employees/{employee_id}/teams/{team_id}", headers=acme["headers"])

        response = await client.delete(f"/api/employees/{employee_id}/teams/{team_id}", headers=globex["headers"])

        assert response.status_code == 404
        team = (await client.get("/api/teams", headers=acme["headers"])).json()[0]
        assert team["member_count"] == 1

    async def test_audit_trail_is_scoped(self, client: AsyncClient, acme, globex):
        await create_employee(client, acme["headers"])

        profile = (await client.get("/api/auth/profile", headers=globex["headers"])).json()
        logs = (await client.get("/api/audit/logs", headers=globex["headers"])).json()
        assert {entry["organisation_id"] for entry in logs["logs"]} == {profile["user"]["organisation_id"]}
        assert [entry["resource_type"] for entry in logs["logs"]] == ["ORGANISATION"]

        stats = (await client.get("/api/audit/stats", headers=globex["headers"])).json()
        assert stats["resource_stats"] == [{"resource_type": "ORGANISATION", "count": 1}]
