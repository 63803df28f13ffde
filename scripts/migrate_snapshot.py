# scripts/migrate_snapshot.py
#  to run the script, run the following command:
#  python scripts/migrate_snapshot.py path/to/snapshot.json

"""
Snapshot Migration Script
Copies every patient record from a memory-store JSON snapshot into the SQLite store
"""
import asyncio
import logging
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from gyneco.config.appconfig import settings
from gyneco.database.errors import RecordStoreError
from gyneco.database.memory_db_service import MemoryDatabaseService
from gyneco.database.migration import migrate
from gyneco.database.schema import SchemaManager
from gyneco.database.sql_db_service import SqlDatabaseService

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def migrate_snapshot(snapshot_path: Path) -> bool:
    start_time = time.time()
    if not snapshot_path.exists():
        logger.error(f"❌ Snapshot not found at: {snapshot_path}")
        return False

    logger.info(f"📄 Loading snapshot: {snapshot_path}")
    logger.info(f"💾 Target database: {settings.resolved_database_path}")

    source = MemoryDatabaseService(settings, snapshot_path)
    target = SqlDatabaseService(SchemaManager(settings))
    try:
        summary = await migrate(source, target)
    except RecordStoreError as e:
        logger.error(f"❌ Migration aborted: {e}", exc_info=True)
        return False
    finally:
        await target.close()

    logger.info(f"⏱️ Migration took {time.time() - start_time:.2f} seconds")
    for failure in summary.failures:
        logger.warning(f"   skipped {failure}")
    return summary.failed == 0


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("   GYNECO - SNAPSHOT MIGRATION")
    print("=" * 60 + "\n")

    path = Path(sys.argv[1]) if len(sys.argv) > 1 else settings.resolved_snapshot_path
    if path is None:
        logger.error("❌ No snapshot given and MEMORY_SNAPSHOT_PATH is not set")
        sys.exit(2)

    success = asyncio.run(migrate_snapshot(path))

    if success:
        print("\n" + "=" * 60)
        print("   ✅ SUCCESS - Records copied to SQLite")
        print("=" * 60 + "\n")
        sys.exit(0)
    else:
        print("\n" + "=" * 60)
        print("   ❌ FAILED - Check errors above")
        print("=" * 60 + "\n")
        sys.exit(1)
