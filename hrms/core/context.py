# hrms/core/context.py - Per-application runtime context
from dataclasses import dataclass

from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from hrms.auth.security import PasswordHasher, TokenService
from hrms.core.config import Settings
from hrms.db.database import Database


@dataclass(frozen=True)
class AppContext:
    """Everything a request needs that outlives the request. Built once by create_app."""
    settings: Settings
    database: Database
    tokens: TokenService
    hasher: PasswordHasher
    limiter: Limiter
    rate_limit: RateLimitItem


def build_context(settings: Settings) -> AppContext:
    return AppContext(
        settings=settings,
        database=Database(settings),
        tokens=TokenService.from_settings(settings),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        limiter=Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED),
        rate_limit=parse(settings.DEFAULT_RATE_LIMIT),
    )
