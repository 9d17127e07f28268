# hrms/api/endpoints/employees.py
from typing import List

from fastapi import APIRouter, Depends, status

from hrms.api.dependencies import get_employee_manager, get_membership_manager
from hrms.api.schemas.common import CreatedResponse, MessageResponse
from hrms.api.schemas.employees import EmployeeInput, EmployeeWithTeams
from hrms.auth.dependencies import get_current_principal, get_request_meta
from hrms.core.results import unwrap
from hrms.services.audit import RequestMeta
from hrms.services.employees import EmployeeManager
from hrms.services.identity import Principal
from hrms.services.memberships import MembershipManager

router = APIRouter()


@router.get("", response_model=List[EmployeeWithTeams])
async def list_employees(
        principal: Principal = Depends(get_current_principal),
        employees: EmployeeManager = Depends(get_employee_manager),
):
    """All employees of the caller's organisation, newest first, with their teams"""
    return unwrap(await employees.list(principal))


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
        payload: EmployeeInput,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        employees: EmployeeManager = Depends(get_employee_manager),
):
    employee_id = unwrap(await employees.create(principal, payload, meta))
    return {"id": employee_id, "message": "Employee created successfully"}


@router.put("/{employee_id}", response_model=MessageResponse)
async def update_employee(
        employee_id: str,
        payload: EmployeeInput,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        employees: EmployeeManager = Depends(get_employee_manager),
):
    unwrap(await employees.update(principal, employee_id, payload, meta))
    return {"message": "Employee updated successfully"}


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
        employee_id: str,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        employees: EmployeeManager = Depends(get_employee_manager),
):
    unwrap(await employees.delete(principal, employee_id, meta))
    return {"message": "Employee deleted successfully"}


@router.post("/{employee_id}/teams/{team_id}", response_model=MessageResponse)
async def assign_to_team(
        employee_id: str,
        team_id: str,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        memberships: MembershipManager = Depends(get_membership_manager),
):
    unwrap(await memberships.assign(principal, employee_id, team_id, meta))
    return {"message": "Employee assigned to team successfully"}


@router.delete("/{employee_id}/teams/{team_id}", response_model=MessageResponse)
async def remove_from_team(
        employee_id: str,
        team_id: str,
        principal: Principal = Depends(get_current_principal),
        meta: RequestMeta = Depends(get_request_meta),
        memberships: MembershipManager = Depends(get_membership_manager),
):
    unwrap(await memberships.unassign(principal, employee_id, team_id, meta))
    return {"message": "Employee removed from team successfully"}
