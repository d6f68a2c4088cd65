"""FleetQuote configuration management.

Loads configuration from environment variables with sensible defaults.
Catalog prices are held in EUR.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class DBConfig:
    """Database connection configuration."""

    url: str
    pool_size: int = 10
    pool_max_overflow: int = 20
    pool_timeout: int = 30
    echo: bool = False  # SQL logging


@dataclass
class MatrixConfig:
    """Configuration matrix import/export settings."""

    currency: str = "EUR"
    export_sheet_name: str = "Configuration Matrix"
    export_dir: Path = Path("exports")


@dataclass
class AppConfig:
    """Root application configuration.

    Loads from environment variables with fail-fast on missing required values.
    """

    db: DBConfig
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    matrix: MatrixConfig = field(default_factory=MatrixConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Required environment variables:
        - DATABASE_URL: SQLAlchemy async connection string

        Optional (with defaults):
        - LOG_LEVEL: Logging verbosity (default: "INFO")
        - LOG_FORMAT: "json" or "text" (default: "text")
        - DEFAULT_CURRENCY, MATRIX_EXPORT_SHEET, MATRIX_EXPORT_DIR

        Raises:
            KeyError: If required environment variables are missing
        """
        database_url = os.environ.get("DATABASE_URL")
        if not database_url:
            raise KeyError(
                "DATABASE_URL environment variable is required. "
                "Example: sqlite+aiosqlite:///./fleetquote.db"
            )

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
            db=DBConfig(
                url=database_url,
                pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
                pool_max_overflow=int(os.getenv("DB_POOL_MAX_OVERFLOW", "20")),
                pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
                echo=os.getenv("DB_ECHO", "false").lower() == "true",
            ),
            matrix=MatrixConfig(
                currency=os.getenv("DEFAULT_CURRENCY", "EUR"),
                export_sheet_name=os.getenv("MATRIX_EXPORT_SHEET", "Configuration Matrix"),
                export_dir=Path(os.getenv("MATRIX_EXPORT_DIR", "exports")),
            ),
        )


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment.

    Raises:
        KeyError: If required environment variables are missing
    """
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None
