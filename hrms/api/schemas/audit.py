# hrms/api/schemas/audit.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from hrms.core.pagination import PaginationMeta


class AuditLogEntry(BaseModel):
    id: str
    organisation_id: Optional[str] = None
    user_id: Optional[str] = None
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    details: Any = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class AuditLogPage(BaseModel):
    logs: List[AuditLogEntry]
    pagination: PaginationMeta


class ActionCount(BaseModel):
    action: str
    count: int


class ResourceCount(BaseModel):
    resource_type: str
    count: int


class DailyCount(BaseModel):
    date: str
    count: int


class AuditStats(BaseModel):
    action_stats: List[ActionCount]
    resource_stats: List[ResourceCount]
    daily_activity: List[DailyCount]
