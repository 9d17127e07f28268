# hrms/auth/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from hrms.core import tracing as logger
from hrms.core.config import Settings


class TokenExpired(Exception):
    """The credential was well formed but is past its validity window"""


class TokenInvalid(Exception):
    """The credential could not be verified or lacks required claims"""


class PasswordHasher:
    """
    Salted bcrypt hashing for user passwords.

    bcrypt is CPU bound, so the async helpers push the work onto a worker thread.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash_sync(self, password: str) -> str:
        return self._context.hash(password)

    def verify_sync(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self._context.verify(plain_password, hashed_password)
        except ValueError:
            # Unrecognised or corrupt hash
            return False

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self.hash_sync, password)

    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        return await run_in_threadpool(self.verify_sync, plain_password, hashed_password)


class TokenService:
    """Issues and verifies HS256 access tokens"""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 24 * 60):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.JWT_SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue(
            self,
            user_id: str,
            organisation_id: str,
            email: str,
            role: str,
            now: Optional[datetime] = None,
    ) -> str:
        """
        Create a signed token embedding the principal's identity.
        ``now`` defaults to the current UTC time.
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": email,
            "user_id": user_id,
            "organisation_id": organisation_id,
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict:
        """
        Verify signature and expiry and return the claims.
        Raises TokenExpired or TokenInvalid.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            logger.debug("Expired token presented")
            raise TokenExpired(str(e)) from e
        except JWTError as e:
            logger.warning("JWT decoding error", error=str(e))
            raise TokenInvalid(str(e)) from e

        if not payload.get("user_id"):
            logger.warning("Invalid token payload - missing user_id")
            raise TokenInvalid("missing user_id claim")
        return payload
