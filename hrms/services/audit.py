# hrms/services/audit.py
"""Audit trail: best-effort recording and tenant-scoped querying"""
import json
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, insert, select

from hrms.core import tracing as logger
from hrms.core.pagination import PaginationMeta, PaginationParams
from hrms.core.results import Result, Success
from hrms.db.gateway import Gateway
from hrms.db.models import AuditLog, User
from hrms.db.models.base import new_id, utcnow

DAILY_ACTIVITY_DAYS = 30


@dataclass(frozen=True)
class RequestMeta:
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class AuditRecorder:
    """
    Appends one immutable audit row per mutating action.

    ``record`` runs after the triggering mutation has committed and never raises:
    a failed write is logged and dropped.
    """

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    async def record(
            self,
            action: str,
            resource_type: str,
            resource_id: Optional[str],
            details: Optional[Dict[str, Any]],
            principal=None,
            meta: Optional[RequestMeta] = None,
    ) -> None:
        meta = meta or RequestMeta()
        try:
            await self.gateway.run(
                insert(AuditLog).values(
                    id=new_id(),
                    organisation_id=principal.organisation_id if principal else None,
                    user_id=principal.user_id if principal else None,
                    action=action,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    details=json.dumps(details or {}, default=_json_default),
                    ip_address=meta.ip_address,
                    user_agent=meta.user_agent,
                    created_at=utcnow(),
                )
            )
        except Exception as e:
            logger.error(
                "Audit log error",
                action=action,
                resource_type=resource_type,
                error=str(e),
                type=type(e).__name__,
            )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _decode_details(raw: Optional[str]) -> Any:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class AuditQueryManager:
    """Read side of the audit trail, always filtered by the caller's organisation"""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    @staticmethod
    def _criteria(
            organisation_id: str,
            action: Optional[str] = None,
            resource_type: Optional[str] = None,
            start_date: Optional[datetime] = None,
            end_date: Optional[datetime] = None,
    ) -> list:
        criteria = [AuditLog.organisation_id == organisation_id]
        if action:
            criteria.append(AuditLog.action == action)
        if resource_type:
            criteria.append(AuditLog.resource_type == resource_type)
        if start_date:
            criteria.append(AuditLog.created_at >= _as_utc(start_date))
        if end_date:
            criteria.append(AuditLog.created_at <= _as_utc(end_date))
        return criteria

    async def list_logs(
            self,
            principal,
            pagination: PaginationParams,
            action: Optional[str] = None,
            resource_type: Optional[str] = None,
            start_date: Optional[datetime] = None,
            end_date: Optional[datetime] = None,
    ) -> Result[Dict[str, Any]]:
        criteria = self._criteria(principal.organisation_id, action, resource_type, start_date, end_date)

        total = await self.gateway.scalar(
            select(func.count(AuditLog.id).label("total")).where(*criteria)
        ) or 0

        rows = await self.gateway.get_many(
            select(
                AuditLog.id,
                AuditLog.organisation_id,
                AuditLog.user_id,
                AuditLog.action,
                AuditLog.resource_type,
                AuditLog.resource_id,
                AuditLog.details,
                AuditLog.ip_address,
                AuditLog.user_agent,
                AuditLog.created_at,
                User.name.label("user_name"),
                User.email.label("user_email"),
            )
            .outerjoin(User, User.id == AuditLog.user_id)
            .where(*criteria)
            .order_by(AuditLog.created_at.desc())
            .limit(pagination.limit)
            .offset(pagination.offset)
        )

        logs = []
        for row in rows:
            entry = dict(row)
            entry["details"] = _decode_details(entry["details"])
            logs.append(entry)

        return Success({
            "logs": logs,
            "pagination": PaginationMeta.build(pagination, total).model_dump(),
        })

    async def stats(
            self,
            principal,
            start_date: Optional[datetime] = None,
            end_date: Optional[datetime] = None,
    ) -> Result[Dict[str, List[Dict[str, Any]]]]:
        criteria = self._criteria(principal.organisation_id, start_date=start_date, end_date=end_date)

        count = func.count(AuditLog.id).label("count")
        action_stats = await self.gateway.get_many(
            select(AuditLog.action, count)
            .where(*criteria)
            .group_by(AuditLog.action)
            .order_by(count.desc(), AuditLog.action)
        )
        resource_stats = await self.gateway.get_many(
            select(AuditLog.resource_type, count)
            .where(*criteria)
            .group_by(AuditLog.resource_type)
            .order_by(count.desc(), AuditLog.resource_type)
        )

        day = func.date(AuditLog.created_at).label("date")
        daily = await self.gateway.get_many(
            select(day, count)
            .where(*criteria)
            .group_by(day)
            .order_by(day.desc())
            .limit(DAILY_ACTIVITY_DAYS)
        )

        return Success({
            "action_stats": [dict(r) for r in action_stats],
            "resource_stats": [dict(r) for r in resource_stats],
            "daily_activity": [
                {"date": r["date"] if isinstance(r["date"], str) else r["date"].isoformat(), "count": r["count"]}
                for r in daily
            ],
        })
