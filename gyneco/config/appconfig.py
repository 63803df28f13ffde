# gyneco/config/appconfig.py
"""
Application Configuration
Controls the backing store, the default organization and logging.
"""
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

# Calculate the project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Configuration for the clinical record store"""

    # ============================================================================
    # BACKING STORE SELECTION
    # ============================================================================
    # "sqlite" → persistent local file (production)
    # "memory" → in-process stand-in, optionally mirrored to a JSON snapshot
    DATABASE_BACKEND: Literal["sqlite", "memory"] = "sqlite"

    # ── SQLite Settings ──
    DATABASE_PATH: str = str(BASE_DIR / "data" / "gyneco.db")
    DATABASE_ECHO: bool = False

    # ── Memory Store Settings ──
    MEMORY_SNAPSHOT_PATH: Optional[str] = None

    # ============================================================================
    # DEFAULT ORGANIZATION (created on first initialization)
    # ============================================================================
    DEFAULT_ORGANIZATION_ID: str = "default-studio"
    DEFAULT_ORGANIZATION_NAME: str = "Studio Ginecologico"
    DEFAULT_DOCTOR_NAME: str = "Dr.ssa"
    DEFAULT_DOCTOR_TITLE: str = "Specialista in Ginecologia e Ostetricia"

    # ============================================================================
    # SEQUENTIAL NUMBERING
    # ============================================================================
    REPORT_NUMBER_PREFIX: str = Field(default="REF", min_length=1)
    INVOICE_NUMBER_PREFIX: str = Field(default="INV", min_length=1)

    # ============================================================================
    # LOGGING
    # ============================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    # ========================================================================
    # COMPUTED PROPERTIES
    # ========================================================================
    @property
    def resolved_database_path(self) -> Path:
        """Get absolute path to the SQLite file."""
        path = Path(self.DATABASE_PATH)
        return path if path.is_absolute() else BASE_DIR / path

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.resolved_database_path}"

    @property
    def resolved_snapshot_path(self) -> Optional[Path]:
        if not self.MEMORY_SNAPSHOT_PATH:
            return None
        path = Path(self.MEMORY_SNAPSHOT_PATH)
        return path if path.is_absolute() else BASE_DIR / path

    @property
    def LOGGING_CONFIG(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "gyneco": {"handlers": ["console"], "level": self.LOG_LEVEL, "propagate": False},
                "sqlalchemy.engine": {"handlers": ["console"], "level": "WARNING", "propagate": False},
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }


settings = Settings()
