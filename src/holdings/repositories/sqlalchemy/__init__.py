"""SQLAlchemy repository implementations."""

from holdings.repositories.sqlalchemy.database import (
    Base,
    create_engine_for_url,
    create_session_factory,
    init_db,
)
from holdings.repositories.sqlalchemy.cache_store import SqlAlchemyCacheStore

__all__ = [
    "Base",
    "create_engine_for_url",
    "create_session_factory",
    "init_db",
    "SqlAlchemyCacheStore",
]
