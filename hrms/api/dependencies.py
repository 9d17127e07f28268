# hrms/api/dependencies.py
from fastapi import Depends

from hrms.auth.dependencies import get_audit_recorder, get_context, get_gateway
from hrms.core.context import AppContext
from hrms.db.gateway import Gateway
from hrms.services.accounts import AccountService
from hrms.services.audit import AuditQueryManager, AuditRecorder
from hrms.services.employees import EmployeeManager
from hrms.services.memberships import MembershipManager
from hrms.services.teams import TeamManager


def get_account_service(
        gateway: Gateway = Depends(get_gateway),
        audit: AuditRecorder = Depends(get_audit_recorder),
        context: AppContext = Depends(get_context),
) -> AccountService:
    return AccountService(gateway, audit, context.hasher, context.tokens)


def get_employee_manager(
        gateway: Gateway = Depends(get_gateway),
        audit: AuditRecorder = Depends(get_audit_recorder),
) -> EmployeeManager:
    return EmployeeManager(gateway, audit)


def get_team_manager(
        gateway: Gateway = Depends(get_gateway),
        audit: AuditRecorder = Depends(get_audit_recorder),
) -> TeamManager:
    return TeamManager(gateway, audit)


def get_membership_manager(
        gateway: Gateway = Depends(get_gateway),
        audit: AuditRecorder = Depends(get_audit_recorder),
) -> MembershipManager:
    return MembershipManager(gateway, audit)


def get_audit_query_manager(gateway: Gateway = Depends(get_gateway)) -> AuditQueryManager:
    return AuditQueryManager(gateway)
