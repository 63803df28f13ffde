# gyneco/main.py
from dotenv import load_dotenv

load_dotenv()

import logging
import logging.config
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from gyneco import __version__
from gyneco.config.appconfig import settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

from gyneco.database.database_service import DatabaseService
from gyneco.database.factory import build_database_service
from gyneco.system_services.system_routes import router as system_router

logger = logging.getLogger(__name__)


def create_app(database: Optional[DatabaseService] = None) -> FastAPI:
    """Build the API around ``database``, or the configured store when omitted."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        app.state.database = database or build_database_service(settings)
        logger.info("===============================================================")
        logger.info(f" 🚀 Starting Gyneco record service v{__version__}")
        logger.info(f" ✅ Backing store: {app.state.database.backend_name}")
        logger.info(f" ✅ Default organization: {settings.DEFAULT_ORGANIZATION_ID}")
        logger.info(
            f" ✅ Numbering: {settings.REPORT_NUMBER_PREFIX}-YYYY-NNNN / {settings.INVOICE_NUMBER_PREFIX}-YYYY-NNNN"
        )
        logger.info("===============================================================")
        yield
        # Shutdown
        await app.state.database.close()
        logger.info("👋 Shutting down")

    app = FastAPI(
        title="Gyneco Records",
        description="Clinical records of a gynecology practice: patients, deliveries, reports, invoices and appointments",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(system_router, prefix="/api", tags=["Records"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("gyneco.main:app", host="127.0.0.1", port=8000, reload=True)
