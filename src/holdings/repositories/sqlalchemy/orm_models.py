"""SQLAlchemy ORM model definitions."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    Float,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from holdings.repositories.sqlalchemy.database import Base


class CacheSessionORM(Base):
    """SQLAlchemy model for one cached snapshot (cache entry)."""

    __tablename__ = "cache_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cache_key = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    expiry_interval = Column(Float, nullable=False, default=300.0)
    is_valid = Column(Boolean, nullable=False, default=True)

    holdings = relationship(
        "CachedHoldingORM",
        back_populates="session",
        order_by="CachedHoldingORM.position",
        cascade="all, delete-orphan",
    )


class CachedHoldingORM(Base):
    """SQLAlchemy model for a holding row owned by a cache session."""

    __tablename__ = "cached_holdings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        Integer,
        ForeignKey("cache_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False)
    symbol = Column(String(20), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    ltp = Column(Float, nullable=False, default=0.0)
    average_price = Column(Float, nullable=False, default=0.0)
    close = Column(Float, nullable=False, default=0.0)

    session = relationship("CacheSessionORM", back_populates="holdings")
