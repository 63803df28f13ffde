# gyneco/database/schema.py
"""
Schema Manager.

Guarantees that the record store's tables and indexes exist before any
repository statement runs, and that exactly one Organization row exists.
Initialization is lazy and happens once per manager: concurrent first callers
wait on a lock while the first one performs the setup.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from gyneco.config.appconfig import Settings, settings as default_settings
from gyneco.database.connection import Base, StoreHandle, open_store
from gyneco.database.errors import StoreUnavailableError
from gyneco.helpers.time import utcnow
from gyneco.model_registry import Organization

logger = logging.getLogger(__name__)


class SchemaManager:
    """Owns the process-wide ``StoreHandle`` and creates it on first use."""

    def __init__(self, app_settings: Optional[Settings] = None, database_url: Optional[str] = None):
        self.settings = app_settings or default_settings
        self.database_url = database_url or self.settings.database_url
        self._handle: Optional[StoreHandle] = None
        self._lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._handle is not None

    @property
    def default_org_id(self) -> str:
        return self.settings.DEFAULT_ORGANIZATION_ID

    async def ensure_ready(self) -> StoreHandle:
        """Open and prepare the store once; later calls return the same handle."""
        if self._handle is not None:
            return self._handle

        async with self._lock:
            # Another caller may have finished while we were waiting
            if self._handle is None:
                self._handle = await self._initialize()
        return self._handle

    async def dispose(self) -> None:
        async with self._lock:
            if self._handle is not None:
                await self._handle.engine.dispose()
                self._handle = None
                logger.info("👋 Record store closed")

    # ============================================================
    # ✅ INITIALIZATION
    # ============================================================
    async def _initialize(self) -> StoreHandle:
        logger.info(f"🔄 Initializing record store at {self.database_url}")
        self._prepare_directory()
        handle = open_store(self.database_url, echo=self.settings.DATABASE_ECHO)
        try:
            async with handle.engine.begin() as conn:
                # create_all checks for existing tables and indexes first
                await conn.run_sync(Base.metadata.create_all)
            await self._ensure_default_organization(handle)
        except SQLAlchemyError as e:
            logger.error(f"❌ Record store initialization failed: {e}", exc_info=True)
            await handle.engine.dispose()
            raise StoreUnavailableError("Record store unavailable", cause=e) from e

        logger.info("✅ Record store ready")
        return handle

    def _prepare_directory(self) -> None:
        prefix = "sqlite+aiosqlite:///"
        if not self.database_url.startswith(prefix):
            return
        path = self.database_url[len(prefix):]
        if not path or path == ":memory:":
            return
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot create directory for {path}", cause=e) from e

    async def _ensure_default_organization(self, handle: StoreHandle) -> None:
        async with handle.session() as session:
            async with session.begin():
                result = await session.execute(
                    select(Organization.id).where(Organization.id == self.default_org_id)
                )
                if result.first() is not None:
                    return
                now = utcnow()
                session.add(
                    Organization(
                        id=self.default_org_id,
                        name=self.settings.DEFAULT_ORGANIZATION_NAME,
                        doctor_name=self.settings.DEFAULT_DOCTOR_NAME,
                        doctor_title=self.settings.DEFAULT_DOCTOR_TITLE,
                        created_at=now,
                        updated_at=now,
                    )
                )
        logger.info(f"✅ Default organization created: {self.default_org_id}")
