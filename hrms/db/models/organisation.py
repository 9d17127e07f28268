# hrms/db/models/organisation.py
"""Organisation model, the root of tenancy"""
from sqlalchemy import Column, String

from hrms.db.models.base import Base, TimestampMixin, UUIDMixin


class Organisation(Base, UUIDMixin, TimestampMixin):
    """A tenant. Deleting it cascades to all of its users, employees, teams and audit logs."""
    __tablename__ = "organisations"

    name = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)

    def __repr__(self):
        return f"<Organisation name={self.name}>"
