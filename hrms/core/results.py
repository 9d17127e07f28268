# hrms/core/results.py
"""
Typed outcomes for manager operations.

Every manager call returns either ``Success(value)`` or ``Failure(kind, message)``.
Routers turn a result into a response with ``unwrap()``, which raises ``APIError``
for failures; the exception handler maps the kind to an HTTP status.
"""
import enum
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from hrms.exceptions.errors import APIError

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    DUPLICATE_RESOURCE = "duplicate_resource"
    NOT_FOUND = "not_found"
    CREDENTIAL_MISSING = "credential_missing"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_CREDENTIAL = "invalid_credential"
    CREDENTIAL_EXPIRED = "credential_expired"
    PRINCIPAL_NOT_FOUND = "principal_not_found"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    ok = False


Result = Union[Success[T], Failure]


def not_found(message: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, message)


def duplicate(message: str) -> Failure:
    return Failure(ErrorKind.DUPLICATE_RESOURCE, message)


def unwrap(result: "Result[T]") -> T:
    """Return the success value or raise the failure as an APIError"""
    if isinstance(result, Failure):
        raise APIError(result.kind, result.message)
    return result.value
