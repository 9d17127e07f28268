# hrms/api/schemas/auth.py
from pydantic import BaseModel, Field

from hrms.api.schemas.common import EmailAddress


class RegisterRequest(BaseModel):
    """
    Registration creates a new organisation together with its first admin user.
    """
    organisation_name: str = Field(..., min_length=2, max_length=255, description="Organisation name")
    email: EmailAddress = Field(..., description="Admin user's email address.")
    password: str = Field(..., min_length=6, description="Admin user's password.")
    name: str = Field(..., min_length=2, max_length=255, description="Admin user's display name.")


class LoginRequest(BaseModel):
    """
    Email alone is not globally unique, so the organisation name is required.
    """
    email: EmailAddress = Field(..., description="User's email address for login.")
    password: str = Field(..., min_length=1, description="User's password for login.")
    organisation_name: str = Field(..., min_length=1, description="Organisation the user belongs to.")


class AuthUser(BaseModel):
    id: str
    email: str
    name: str
    role: str
    organisation_name: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: AuthUser


class ProfileUser(AuthUser):
    organisation_id: str


class ProfileResponse(BaseModel):
    user: ProfileUser
