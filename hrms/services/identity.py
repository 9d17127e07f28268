# hrms/services/identity.py
"""
Bearer credential to principal resolution.

The token's claims are never trusted verbatim: the embedded user id is looked up
again (joined to its organisation) so a user deleted after issuance is rejected.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select

from hrms.auth.security import TokenExpired, TokenInvalid, TokenService
from hrms.core import tracing as logger
from hrms.core.results import ErrorKind, Failure, Result, Success
from hrms.db.gateway import Gateway
from hrms.db.models import Organisation, User


@dataclass(frozen=True)
class Principal:
    """The authenticated caller. Sole source of tenant scoping."""
    user_id: str
    organisation_id: str
    email: str
    name: str
    role: str
    organisation_name: str


def principal_query(*criteria):
    return (
        select(
            User.id.label("user_id"),
            User.organisation_id,
            User.email,
            User.name,
            User.role,
            Organisation.name.label("organisation_name"),
        )
        .join(Organisation, Organisation.id == User.organisation_id)
        .where(*criteria)
    )


def principal_from_row(row) -> Principal:
    return Principal(
        user_id=row["user_id"],
        organisation_id=row["organisation_id"],
        email=row["email"],
        name=row["name"],
        role=row["role"],
        organisation_name=row["organisation_name"],
    )


class IdentityResolver:
    def __init__(self, gateway: Gateway, tokens: TokenService):
        self.gateway = gateway
        self.tokens = tokens

    async def resolve(self, token: Optional[str]) -> Result[Principal]:
        if not token:
            return Failure(ErrorKind.CREDENTIAL_MISSING, "Access token required")

        try:
            claims = self.tokens.decode(token)
        except TokenExpired:
            return Failure(ErrorKind.CREDENTIAL_EXPIRED, "Token expired")
        except TokenInvalid:
            return Failure(ErrorKind.INVALID_CREDENTIAL, "Invalid token")

        row = await self.gateway.get_one(principal_query(User.id == claims["user_id"]))
        if row is None:
            logger.warning("User not found for valid token", user_id=claims["user_id"])
            return Failure(ErrorKind.PRINCIPAL_NOT_FOUND, "User not found")

        principal = principal_from_row(row)
        logger.debug("User authenticated", user_id=principal.user_id, org_id=principal.organisation_id)
        return Success(principal)
