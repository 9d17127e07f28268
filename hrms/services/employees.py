# hrms/services/employees.py
from typing import Any, Dict, List

from sqlalchemy import delete, insert, select, update

from hrms.api.schemas.employees import EmployeeInput
from hrms.core import tracing as logger
from hrms.core.results import Result, Success, duplicate, not_found
from hrms.db.gateway import Gateway
from hrms.db.models import AuditAction, Employee, EmployeeTeam, ResourceType, Team
from hrms.db.models.base import new_id
from hrms.exceptions.errors import ConstraintViolation
from hrms.services.audit import AuditRecorder, RequestMeta
from hrms.services.identity import Principal

EMPLOYEE_NOT_FOUND = "Employee not found"
EMPLOYEE_EXISTS = "Employee with this email already exists"

EMPLOYEE_COLUMNS = (
    Employee.id,
    Employee.organisation_id,
    Employee.first_name,
    Employee.last_name,
    Employee.email,
    Employee.position,
    Employee.department,
    Employee.hire_date,
    Employee.created_at,
    Employee.updated_at,
)


def _owned(principal: Principal, employee_id: str):
    return select(Employee.id).where(
        Employee.id == employee_id,
        Employee.organisation_id == principal.organisation_id,
    )


class EmployeeManager:
    """Employees of the caller's organisation"""

    def __init__(self, gateway: Gateway, audit: AuditRecorder):
        self.gateway = gateway
        self.audit = audit

    async def list(self, principal: Principal) -> Result[List[Dict[str, Any]]]:
        rows = await self.gateway.get_many(
            select(*EMPLOYEE_COLUMNS)
            .where(Employee.organisation_id == principal.organisation_id)
            .order_by(Employee.created_at.desc())
        )

        employees = []
        for row in rows:
            employee = dict(row)
            teams = await self.gateway.get_many(
                select(Team.id, Team.name)
                .join(EmployeeTeam, EmployeeTeam.team_id == Team.id)
                .where(
                    EmployeeTeam.employee_id == employee["id"],
                    Team.organisation_id == principal.organisation_id,
                )
                .order_by(Team.name)
            )
            employee["teams"] = [dict(t) for t in teams]
            employees.append(employee)
        return Success(employees)

    async def create(self, principal: Principal, payload: EmployeeInput, meta: RequestMeta) -> Result[str]:
        existing = await self.gateway.get_one(
            select(Employee.id).where(
                Employee.email == payload.email,
                Employee.organisation_id == principal.organisation_id,
            )
        )
        if existing:
            return duplicate(EMPLOYEE_EXISTS)

        employee_id = new_id()
        try:
            await self.gateway.run(
                insert(Employee).values(
                    id=employee_id,
                    organisation_id=principal.organisation_id,
                    **payload.model_dump(),
                )
            )
        except ConstraintViolation:
            return duplicate(EMPLOYEE_EXISTS)

        logger.info("Employee created", employee_id=employee_id, org_id=principal.organisation_id)
        await self.audit.record(
            AuditAction.CREATE.value, ResourceType.EMPLOYEE.value, employee_id,
            payload.model_dump(), principal, meta,
        )
        return Success(employee_id)

    async def update(
            self, principal: Principal, employee_id: str, payload: EmployeeInput, meta: RequestMeta
    ) -> Result[None]:
        if await self.gateway.get_one(_owned(principal, employee_id)) is None:
            return not_found(EMPLOYEE_NOT_FOUND)

        try:
            await self.gateway.run(
                update(Employee)
                .where(Employee.id == employee_id, Employee.organisation_id == principal.organisation_id)
                .values(**payload.model_dump())
            )
        except ConstraintViolation:
            return duplicate(EMPLOYEE_EXISTS)

        await self.audit.record(
            AuditAction.UPDATE.value, ResourceType.EMPLOYEE.value, employee_id,
            payload.model_dump(), principal, meta,
        )
        return Success(None)

    async def delete(self, principal: Principal, employee_id: str, meta: RequestMeta) -> Result[None]:
        if await self.gateway.get_one(_owned(principal, employee_id)) is None:
            return not_found(EMPLOYEE_NOT_FOUND)

        await self.gateway.run(
            delete(Employee).where(
                Employee.id == employee_id,
                Employee.organisation_id == principal.organisation_id,
            )
        )
        logger.info("Employee deleted", employee_id=employee_id, org_id=principal.organisation_id)
        await self.audit.record(
            AuditAction.DELETE.value, ResourceType.EMPLOYEE.value, employee_id, {}, principal, meta,
        )
        return Success(None)
