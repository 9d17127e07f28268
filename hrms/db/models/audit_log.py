# hrms/db/models/audit_log.py
"""Append-only audit trail"""
from sqlalchemy import Column, DateTime, String, Text, ForeignKey, Index, func

from hrms.db.models.base import Base, UUIDMixin, utcnow


class AuditLog(Base, UUIDMixin):
    """
    One immutable record per mutating action.

    Rows are never updated or deleted by the application; they only disappear
    through cascades when their organisation or user is deleted.
    """
    __tablename__ = "audit_logs"

    organisation_id = Column(String(36), ForeignKey("organisations.id", ondelete="CASCADE"), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    action = Column(String(50), nullable=False)
    resource_type = Column(String(50), nullable=False)
    resource_id = Column(String(36), nullable=True)
    details = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_audit_logs_org", "organisation_id"),
        Index("idx_audit_logs_user", "user_id"),
        Index("idx_audit_logs_created", "created_at"),
    )

    def __repr__(self):
        return f"<AuditLog action={self.action} resource_type={self.resource_type}>"
