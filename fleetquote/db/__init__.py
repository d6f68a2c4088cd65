"""Database layer for FleetQuote with async SQLAlchemy."""

from fleetquote.db.connection import close_db, get_engine, get_session, init_db
from fleetquote.db.models import Base, ConfigurationMatrixModel

__all__ = [
    "Base",
    "ConfigurationMatrixModel",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
]
