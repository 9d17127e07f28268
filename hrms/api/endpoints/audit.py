# hrms/api/endpoints/audit.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrms.api.dependencies import get_audit_query_manager
from hrms.api.schemas.audit import AuditLogPage, AuditStats
from hrms.auth.dependencies import get_current_principal
from hrms.core.pagination import PaginationParams, get_pagination_params
from hrms.core.results import unwrap
from hrms.services.audit import AuditQueryManager
from hrms.services.identity import Principal

router = APIRouter()


@router.get("/logs", response_model=AuditLogPage)
async def get_audit_logs(
        pagination: PaginationParams = Depends(get_pagination_params),
        action: Optional[str] = Query(None, description="Filter by action, e.g. CREATE"),
        resource_type: Optional[str] = Query(None, description="Filter by resource type, e.g. EMPLOYEE"),
        start_date: Optional[datetime] = Query(None, description="Inclusive lower bound on created_at"),
        end_date: Optional[datetime] = Query(None, description="Inclusive upper bound on created_at"),
        principal: Principal = Depends(get_current_principal),
        audit: AuditQueryManager = Depends(get_audit_query_manager),
):
    return unwrap(await audit.list_logs(
        principal,
        pagination,
        action=action,
        resource_type=resource_type,
        start_date=start_date,
        end_date=end_date,
    ))


@router.get("/stats", response_model=AuditStats)
async def get_audit_stats(
        start_date: Optional[datetime] = Query(None),
        end_date: Optional[datetime] = Query(None),
        principal: Principal = Depends(get_current_principal),
        audit: AuditQueryManager = Depends(get_audit_query_manager),
):
    return unwrap(await audit.stats(principal, start_date=start_date, end_date=end_date))
