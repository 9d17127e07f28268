# hrms/api/schemas/common.py
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel


def check_email(value: str) -> str:
    """Validate the address but keep it exactly as submitted"""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return value


EmailAddress = Annotated[str, AfterValidator(check_email)]


class MessageResponse(BaseModel):
    message: str


class CreatedResponse(MessageResponse):
    id: str


class ErrorResponse(BaseModel):
    error: str
