# hrms/db/models/enums.py
import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    ASSIGN = "ASSIGN"
    UNASSIGN = "UNASSIGN"


class ResourceType(str, enum.Enum):
    ORGANISATION = "ORGANISATION"
    USER = "USER"
    EMPLOYEE = "EMPLOYEE"
    TEAM = "TEAM"
    EMPLOYEE_TEAM = "EMPLOYEE_TEAM"
