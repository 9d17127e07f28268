# hrms/exceptions/errors.py
from typing import Optional

# SQLSTATE class 23 codes reported by PostgreSQL drivers
FOREIGN_KEY_VIOLATION = "23503"


class APIError(Exception):
    """A typed failure surfaced to the HTTP boundary"""

    def __init__(self, kind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class StorageError(Exception):
    """The relational store rejected or failed a statement"""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class ConstraintViolation(StorageError):
    """A uniqueness or foreign-key constraint rejected a write"""

    @property
    def is_foreign_key(self) -> bool:
        sqlstate = getattr(getattr(self.original, "orig", None), "sqlstate", None)
        if sqlstate:
            return sqlstate == FOREIGN_KEY_VIOLATION
        # SQLite carries no SQLSTATE, only the message
        return "FOREIGN KEY" in str(self).upper()

    def involves(self, *names: str) -> bool:
        """True when the store's message names any of the given constraints or table.column pairs"""
        message = str(self)
        return any(name in message for name in names)
