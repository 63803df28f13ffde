# gyneco/database/factory.py
import logging
from typing import Optional

from gyneco.config.appconfig import Settings, settings as default_settings
from gyneco.database.database_service import DatabaseService
from gyneco.database.memory_db_service import MemoryDatabaseService
from gyneco.database.schema import SchemaManager
from gyneco.database.sql_db_service import SqlDatabaseService

logger = logging.getLogger(__name__)


def build_database_service(app_settings: Optional[Settings] = None) -> DatabaseService:
    """Pick the backing store once, from ``DATABASE_BACKEND``."""
    app_settings = app_settings or default_settings

    if app_settings.DATABASE_BACKEND == "memory":
        logger.info(f"🧪 Using in-memory record store (snapshot: {app_settings.resolved_snapshot_path})")
        return MemoryDatabaseService(app_settings, app_settings.resolved_snapshot_path)

    logger.info(f"💾 Using SQLite record store: {app_settings.resolved_database_path}")
    return SqlDatabaseService(SchemaManager(app_settings))
