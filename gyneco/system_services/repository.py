# gyneco/system_services/repository.py
"""
Shared plumbing for the entity repositories.

Every repository receives the ``SchemaManager`` at construction time and asks
it for the store handle on each call, so the first call of any repository
triggers schema creation. ``transaction()`` is the only place where SQLAlchemy
exceptions are translated into the record store error taxonomy.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Type

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gyneco.database.errors import (
    ConstraintViolationError,
    OperationFailedError,
    RecordNotFoundError,
    RecordStoreError,
)
from gyneco.database.schema import SchemaManager
from gyneco.helpers.time import utcnow

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def like_pattern(term: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BaseRepository:
    entity_name = "Record"
    model: Type[Any]

    def __init__(self, schema: SchemaManager):
        self.schema = schema

    @property
    def default_org_id(self) -> str:
        return self.schema.default_org_id

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        handle = await self.schema.ensure_ready()
        try:
            async with handle.session() as session:
                async with session.begin():
                    yield session
        except RecordStoreError:
            raise
        except IntegrityError as e:
            logger.error(f"❌ {self.entity_name} {operation}: constraint violated: {e.orig}")
            raise ConstraintViolationError(
                f"{self.entity_name} {operation} violates a store constraint", cause=e
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"❌ {self.entity_name} {operation} failed: {e}", exc_info=True)
            raise OperationFailedError(f"{self.entity_name} {operation} failed", cause=e) from e

    # ============================================================
    # ✅ ROW HELPERS (call inside transaction())
    # ============================================================
    async def _reread(self, session: AsyncSession, record_id: str):
        """Load the row from the store, bypassing the session identity map."""
        return await session.get(self.model, record_id, populate_existing=True)

    async def _insert(self, session: AsyncSession, row):
        session.add(row)
        await session.flush()
        return await self._reread(session, row.id)

    async def _update(self, session: AsyncSession, record_id: str, changes: dict):
        row = await session.get(self.model, record_id)
        if row is None:
            raise RecordNotFoundError(self.entity_name, record_id)
        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        await session.flush()
        return await self._reread(session, record_id)

    async def _delete(self, session: AsyncSession, record_id: str) -> None:
        result = await session.execute(delete(self.model).where(self.model.id == record_id))
        if result.rowcount == 0:
            raise RecordNotFoundError(self.entity_name, record_id)

    def _org_id(self, org_id: Optional[str]) -> str:
        return org_id or self.default_org_id
