# hrms/api/schemas/employees.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from hrms.api.schemas.common import EmailAddress


class EmployeeInput(BaseModel):
    """Body of employee create and update. Optional text fields accept "" and null."""
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailAddress
    position: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    hire_date: Optional[date] = None

    @field_validator("hire_date", mode="before")
    @classmethod
    def blank_hire_date(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TeamRef(BaseModel):
    id: str
    name: str


class EmployeeResponse(BaseModel):
    id: str
    organisation_id: str
    first_name: str
    last_name: str
    email: str
    position: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class EmployeeWithTeams(EmployeeResponse):
    teams: List[TeamRef] = []
