# hrms/services/accounts.py
"""
Registration, login, logout and profile.

Registration writes the organisation and its admin user in one transaction;
every other flow is a single read followed by an audit write.
"""
from dataclasses import dataclass
from typing import Any, Dict

from sqlalchemy import insert, select

from hrms.api.schemas.auth import LoginRequest, RegisterRequest
from hrms.auth.security import PasswordHasher, TokenService
from hrms.core import tracing as logger
from hrms.core.results import ErrorKind, Failure, Result, Success, duplicate
from hrms.db.gateway import Gateway
from hrms.db.models import AuditAction, Organisation, ResourceType, User, UserRole
from hrms.db.models.base import new_id
from hrms.exceptions.errors import ConstraintViolation
from hrms.services.audit import AuditRecorder, RequestMeta
from hrms.services.identity import Principal, principal_from_row, principal_query


@dataclass(frozen=True)
class Session:
    """A freshly issued credential and the principal it belongs to"""
    token: str
    principal: Principal

    def user_payload(self) -> Dict[str, Any]:
        return {
            "id": self.principal.user_id,
            "email": self.principal.email,
            "name": self.principal.name,
            "role": self.principal.role,
            "organisation_name": self.principal.organisation_name,
        }


class AccountService:
    def __init__(
            self,
            gateway: Gateway,
            audit: AuditRecorder,
            hasher: PasswordHasher,
            tokens: TokenService,
    ):
        self.gateway = gateway
        self.audit = audit
        self.hasher = hasher
        self.tokens = tokens

    def _issue(self, principal: Principal) -> Session:
        token = self.tokens.issue(
            user_id=principal.user_id,
            organisation_id=principal.organisation_id,
            email=principal.email,
            role=principal.role,
        )
        return Session(token=token, principal=principal)

    async def register(self, payload: RegisterRequest, meta: RequestMeta) -> Result[Session]:
        if await self.gateway.get_one(select(Organisation.id).where(Organisation.name == payload.organisation_name)):
            return duplicate("Organisation name already exists")

        # Email uniqueness across every organisation is only enforced here
        if await self.gateway.get_one(select(User.id).where(User.email == payload.email)):
            return duplicate("User email already exists")

        password_hash = await self.hasher.hash(payload.password)
        organisation_id = new_id()
        user_id = new_id()

        try:
            async with self.gateway.transaction():
                await self.gateway.run(
                    insert(Organisation).values(
                        id=organisation_id,
                        name=payload.organisation_name,
                        email=payload.email,
                    )
                )
                await self.gateway.run(
                    insert(User).values(
                        id=user_id,
                        organisation_id=organisation_id,
                        email=payload.email,
                        password_hash=password_hash,
                        name=payload.name,
                        role=UserRole.ADMIN.value,
                    )
                )
        except ConstraintViolation as e:
            # Lost a race with a concurrent registration
            if e.involves("organisations.name", "organisations_name_key"):
                return duplicate("Organisation name already exists")
            return duplicate("User email already exists")

        principal = Principal(
            user_id=user_id,
            organisation_id=organisation_id,
            email=payload.email,
            name=payload.name,
            role=UserRole.ADMIN.value,
            organisation_name=payload.organisation_name,
        )
        logger.info("Organisation registered", org_id=organisation_id, user_id=user_id)

        await self.audit.record(
            AuditAction.CREATE.value,
            ResourceType.ORGANISATION.value,
            organisation_id,
            {
                "organisation_name": payload.organisation_name,
                "admin_email": payload.email,
                "admin_name": payload.name,
            },
            principal,
            meta,
        )
        return Success(self._issue(principal))

    async def login(self, payload: LoginRequest, meta: RequestMeta) -> Result[Session]:
        invalid = Failure(ErrorKind.INVALID_CREDENTIALS, "Invalid credentials")

        row = await self.gateway.get_one(
            principal_query(
                User.email == payload.email,
                Organisation.name == payload.organisation_name,
            ).add_columns(User.password_hash)
        )
        if row is None:
            logger.warning("Login attempt for unknown user", organisation_name=payload.organisation_name)
            return invalid

        if not await self.hasher.verify(payload.password, row["password_hash"]):
            logger.warning("Login attempt with wrong password", user_id=row["user_id"])
            return invalid

        principal = principal_from_row(row)
        await self.audit.record(
            AuditAction.LOGIN.value, ResourceType.USER.value, principal.user_id, {}, principal, meta,
        )
        logger.info("User logged in", user_id=principal.user_id, org_id=principal.organisation_id)
        return Success(self._issue(principal))

    async def logout(self, principal: Principal, meta: RequestMeta) -> Result[None]:
        # Tokens are not revoked; they stay valid until expiry
        await self.audit.record(
            AuditAction.LOGOUT.value, ResourceType.USER.value, principal.user_id, {}, principal, meta,
        )
        return Success(None)

    @staticmethod
    def profile(principal: Principal) -> Dict[str, Any]:
        return {
            "id": principal.user_id,
            "email": principal.email,
            "name": principal.name,
            "role": principal.role,
            "organisation_id": principal.organisation_id,
            "organisation_name": principal.organisation_name,
        }
