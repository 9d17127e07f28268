# hrms/services/teams.py
from typing import Any, Dict, List

from sqlalchemy import delete, func, insert, select, update

from hrms.api.schemas.teams import TeamInput
from hrms.core import tracing as logger
from hrms.core.results import Result, Success, duplicate, not_found
from hrms.db.gateway import Gateway
from hrms.db.models import AuditAction, Employee, EmployeeTeam, ResourceType, Team
from hrms.db.models.base import new_id
from hrms.exceptions.errors import ConstraintViolation
from hrms.services.audit import AuditRecorder, RequestMeta
from hrms.services.employees import EMPLOYEE_COLUMNS
from hrms.services.identity import Principal

TEAM_NOT_FOUND = "Team not found"
TEAM_EXISTS = "Team with this name already exists"


def _owned(principal: Principal, team_id: str):
    return select(Team.id).where(
        Team.id == team_id,
        Team.organisation_id == principal.organisation_id,
    )


def _name_taken(principal: Principal, name: str, *exclude):
    criteria = [Team.name == name, Team.organisation_id == principal.organisation_id]
    if exclude:
        criteria.append(Team.id.notin_(exclude))
    return select(Team.id).where(*criteria)


class TeamManager:
    """Teams of the caller's organisation and their member lists"""

    def __init__(self, gateway: Gateway, audit: AuditRecorder):
        self.gateway = gateway
        self.audit = audit

    async def list(self, principal: Principal) -> Result[List[Dict[str, Any]]]:
        member_count = (
            select(func.count(EmployeeTeam.id))
            .where(EmployeeTeam.team_id == Team.id)
            .correlate(Team)
            .scalar_subquery()
            .label("member_count")
        )
        rows = await self.gateway.get_many(
            select(
                Team.id,
                Team.organisation_id,
                Team.name,
                Team.description,
                Team.created_at,
                Team.updated_at,
                member_count,
            )
            .where(Team.organisation_id == principal.organisation_id)
            .order_by(Team.created_at.desc())
        )

        teams = []
        for row in rows:
            team = dict(row)
            members = await self.gateway.get_many(
                select(Employee.id, Employee.first_name, Employee.last_name, Employee.email, Employee.position)
                .join(EmployeeTeam, EmployeeTeam.employee_id == Employee.id)
                .where(
                    EmployeeTeam.team_id == team["id"],
                    Employee.organisation_id == principal.organisation_id,
                )
                .order_by(EmployeeTeam.assigned_date)
            )
            team["members"] = [dict(m) for m in members]
            teams.append(team)
        return Success(teams)

    async def members(self, principal: Principal, team_id: str) -> Result[List[Dict[str, Any]]]:
        if await self.gateway.get_one(_owned(principal, team_id)) is None:
            return not_found(TEAM_NOT_FOUND)

        rows = await self.gateway.get_many(
            select(*EMPLOYEE_COLUMNS)
            .join(EmployeeTeam, EmployeeTeam.employee_id == Employee.id)
            .where(
                EmployeeTeam.team_id == team_id,
                Employee.organisation_id == principal.organisation_id,
            )
            .order_by(EmployeeTeam.assigned_date)
        )
        return Success([dict(r) for r in rows])

    async def create(self, principal: Principal, payload: TeamInput, meta: RequestMeta) -> Result[str]:
        if await self.gateway.get_one(_name_taken(principal, payload.name)):
            return duplicate(TEAM_EXISTS)

        team_id = new_id()
        try:
            await self.gateway.run(
                insert(Team).values(
                    id=team_id,
                    organisation_id=principal.organisation_id,
                    **payload.model_dump(),
                )
            )
        except ConstraintViolation:
            return duplicate(TEAM_EXISTS)

        logger.info("Team created", team_id=team_id, org_id=principal.organisation_id)
        await self.audit.record(
            AuditAction.CREATE.value, ResourceType.TEAM.value, team_id,
            payload.model_dump(), principal, meta,
        )
        return Success(team_id)

    async def update(self, principal: Principal, team_id: str, payload: TeamInput, meta: RequestMeta) -> Result[None]:
        if await self.gateway.get_one(_owned(principal, team_id)) is None:
            return not_found(TEAM_NOT_FOUND)

        if await self.gateway.get_one(_name_taken(principal, payload.name, team_id)):
            return duplicate(TEAM_EXISTS)

        try:
            await self.gateway.run(
                update(Team)
                .where(Team.id == team_id, Team.organisation_id == principal.organisation_id)
                .values(**payload.model_dump())
            )
        except ConstraintViolation:
            return duplicate(TEAM_EXISTS)

        await self.audit.record(
            AuditAction.UPDATE.value, ResourceType.TEAM.value, team_id,
            payload.model_dump(), principal, meta,
        )
        return Success(None)

    async def delete(self, principal: Principal, team_id: str, meta: RequestMeta) -> Result[None]:
        if await self.gateway.get_one(_owned(principal, team_id)) is None:
            return not_found(TEAM_NOT_FOUND)

        await self.gateway.run(
            delete(Team).where(Team.id == team_id, Team.organisation_id == principal.organisation_id)
        )
        logger.info("Team deleted", team_id=team_id, org_id=principal.organisation_id)
        await self.audit.record(
            AuditAction.DELETE.value, ResourceType.TEAM.value, team_id, {}, principal, meta,
        )
        return Success(None)
