# hrms/db/models/base.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, func

from hrms.db.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False)


class UUIDMixin:
    """Mixin for opaque string identifiers"""
    id = Column(String(36), primary_key=True, default=new_id)
