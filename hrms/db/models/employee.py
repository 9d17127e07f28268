# hrms/db/models/employee.py
"""Employee and team membership models"""
from sqlalchemy import Column, Date, DateTime, String, ForeignKey, Index, UniqueConstraint, func

from hrms.db.models.base import Base, TimestampMixin, UUIDMixin, utcnow


class Employee(Base, UUIDMixin, TimestampMixin):
    """HR record of a person. Not a login principal."""
    __tablename__ = "employees"

    organisation_id = Column(String(36), ForeignKey("organisations.id", ondelete="CASCADE"), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    position = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True)
    hire_date = Column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint("email", "organisation_id", name="unique_employee_email_org"),
        Index("idx_employees_org", "organisation_id"),
    )

    def __repr__(self):
        return f"<Employee email={self.email} org_id={self.organisation_id}>"


class EmployeeTeam(Base, UUIDMixin):
    """Many-to-many association between employees and teams"""
    __tablename__ = "employee_teams"

    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    assigned_date = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "team_id", name="unique_employee_team"),
    )

    def __repr__(self):
        return f"<EmployeeTeam employee_id={self.employee_id} team_id={self.team_id}>"
