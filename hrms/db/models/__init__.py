# hrms/db/models/__init__.py
"""
Database models package
Imports all models so they register on Base.metadata
"""

from hrms.db.models.base import Base, TimestampMixin, UUIDMixin

from hrms.db.models.enums import UserRole, AuditAction, ResourceType

from hrms.db.models.organisation import Organisation
from hrms.db.models.user import User
from hrms.db.models.employee import Employee, EmployeeTeam
from hrms.db.models.team import Team
from hrms.db.models.audit_log import AuditLog

__all__ = [
    # Base classes
    'Base', 'TimestampMixin', 'UUIDMixin',

    # Enums
    'UserRole', 'AuditAction', 'ResourceType',

    # Tenancy
    'Organisation', 'User',

    # HR data
    'Employee', 'EmployeeTeam', 'Team',

    # Audit trail
    'AuditLog',
]
