# hrms/db/gateway.py
"""
Persistence gateway over an AsyncSession.

Three primitives, all taking SQLAlchemy Core statements with bound parameters:

- ``run``      executes a mutation and reports the affected row count
- ``get_one``  fetches at most one row as a mapping
- ``get_many`` fetches all rows as mappings

Outside ``transaction()`` every ``run`` commits on its own. Store failures are
re-raised as ``StorageError``; integrity failures as ``ConstraintViolation``.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from hrms.core import tracing
from hrms.exceptions.errors import ConstraintViolation, StorageError

Row = Mapping[str, Any]


@dataclass(frozen=True)
class RunResult:
    rowcount: int


class Gateway:
    def __init__(self, db: AsyncSession):
        self.db = db
        self._transaction_depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    async def run(self, stmt: Executable) -> RunResult:
        try:
            result = await self.db.execute(stmt)
            if not self.in_transaction:
                await self.db.commit()
            return RunResult(rowcount=result.rowcount)
        except IntegrityError as e:
            await self.db.rollback()
            tracing.debug("Constraint violation", error=str(e.orig))
            raise ConstraintViolation(str(e.orig), original=e) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            tracing.error("Statement failed", error=str(e), type=type(e).__name__)
            raise StorageError(str(e), original=e) from e

    async def get_one(self, stmt: Executable) -> Optional[Row]:
        try:
            result = await self.db.execute(stmt)
            return result.mappings().first()
        except SQLAlchemyError as e:
            tracing.error("Query failed", error=str(e), type=type(e).__name__)
            raise StorageError(str(e), original=e) from e

    async def get_many(self, stmt: Executable) -> List[Row]:
        try:
            result = await self.db.execute(stmt)
            return list(result.mappings().all())
        except SQLAlchemyError as e:
            tracing.error("Query failed", error=str(e), type=type(e).__name__)
            raise StorageError(str(e), original=e) from e

    async def scalar(self, stmt: Executable) -> Any:
        row = await self.get_one(stmt)
        if row is None:
            return None
        return next(iter(row.values()))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["Gateway"]:
        """Group several statements into one commit; roll back on any error."""
        self._transaction_depth += 1
        try:
            yield self
        except BaseException:
            self._transaction_depth -= 1
            if not self.in_transaction:
                await self.db.rollback()
            raise
        else:
            self._transaction_depth -= 1
            if not self.in_transaction:
                try:
                    await self.db.commit()
                except IntegrityError as e:
                    await self.db.rollback()
                    raise ConstraintViolation(str(e.orig), original=e) from e
                except SQLAlchemyError as e:
                    await self.db.rollback()
                    raise StorageError(str(e), original=e) from e
