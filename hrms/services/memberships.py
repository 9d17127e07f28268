# hrms/services/memberships.py
"""Employee to team assignment within one organisation"""
from sqlalchemy import and_, delete, exists, insert, select

from hrms.core import tracing as logger
from hrms.core.results import Result, Success, duplicate, not_found
from hrms.db.gateway import Gateway
from hrms.db.models import AuditAction, Employee, EmployeeTeam, ResourceType, Team
from hrms.db.models.base import new_id
from hrms.exceptions.errors import ConstraintViolation
from hrms.services.audit import AuditRecorder, RequestMeta
from hrms.services.identity import Principal


class MembershipManager:
    def __init__(self, gateway: Gateway, audit: AuditRecorder):
        self.gateway = gateway
        self.audit = audit

    async def assign(self, principal: Principal, employee_id: str, team_id: str, meta: RequestMeta) -> Result[None]:
        """
        Add an employee to a team.

        Both existence checks and the insert share one transaction. A repeated pair
        is rejected by the unique (employee_id, team_id) constraint, not a pre-check.
        """
        try:
            async with self.gateway.transaction():
                employee = await self.gateway.get_one(
                    select(Employee.id).where(
                        Employee.id == employee_id,
                        Employee.organisation_id == principal.organisation_id,
                    )
                )
                team = await self.gateway.get_one(
                    select(Team.id).where(
                        Team.id == team_id,
                        Team.organisation_id == principal.organisation_id,
                    )
                )
                if employee is None or team is None:
                    return not_found("Employee or team not found")

                await self.gateway.run(
                    insert(EmployeeTeam).values(id=new_id(), employee_id=employee_id, team_id=team_id)
                )
        except ConstraintViolation as e:
            # A foreign-key failure means the employee or team was deleted concurrently
            if e.is_foreign_key:
                return not_found("Employee or team not found")
            return duplicate("Employee is already in this team")

        logger.info("Employee assigned to team", employee_id=employee_id, team_id=team_id)
        await self.audit.record(
            AuditAction.ASSIGN.value, ResourceType.EMPLOYEE_TEAM.value, None,
            {"employee_id": employee_id, "team_id": team_id}, principal, meta,
        )
        return Success(None)

    async def unassign(
            self, principal: Principal, employee_id: str, team_id: str, meta: RequestMeta
    ) -> Result[None]:
        """Single conditional delete: existence and tenant ownership are checked by the statement itself"""
        result = await self.gateway.run(
            delete(EmployeeTeam).where(
                and_(
                    EmployeeTeam.employee_id == employee_id,
                    EmployeeTeam.team_id == team_id,
                    exists().where(
                        Employee.id == employee_id,
                        Employee.organisation_id == principal.organisation_id,
                    ),
                    exists().where(
                        Team.id == team_id,
                        Team.organisation_id == principal.organisation_id,
                    ),
                )
            )
        )
        if result.rowcount == 0:
            return not_found("Assignment not found")

        logger.info("Employee removed from team", employee_id=employee_id, team_id=team_id)
        await self.audit.record(
            AuditAction.UNASSIGN.value, ResourceType.EMPLOYEE_TEAM.value, None,
            {"employee_id": employee_id, "team_id": team_id}, principal, meta,
        )
        return Success(None)
