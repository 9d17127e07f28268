# hrms/api/schemas/teams.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TeamInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)


class TeamMember(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    position: Optional[str] = None


class TeamResponse(BaseModel):
    """A team with its member list and member count"""
    id: str
    organisation_id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    member_count: int = 0
    members: List[TeamMember] = []
