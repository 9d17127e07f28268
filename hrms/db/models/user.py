# hrms/db/models/user.py
from sqlalchemy import CheckConstraint, Column, String, ForeignKey, Index, UniqueConstraint

from hrms.db.models.base import Base, TimestampMixin, UUIDMixin
from hrms.db.models.enums import UserRole


class User(Base, UUIDMixin, TimestampMixin):
    """Login principal. Email is unique within an organisation, not globally."""
    __tablename__ = "users"

    organisation_id = Column(String(36), ForeignKey("organisations.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.MANAGER.value)

    __table_args__ = (
        UniqueConstraint("email", "organisation_id", name="unique_user_email_org"),
        CheckConstraint("role IN ('admin', 'manager')", name="ck_users_role"),
        Index("idx_users_org", "organisation_id"),
    )

    def __repr__(self):
        return f"<User email={self.email} org_id={self.organisation_id} role={self.role}>"
