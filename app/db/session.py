"""
Database lifecycle.

The process entry point builds one `Database`, calls `connect()` on startup and
`close()` on shutdown, and hands it to request handlers through `app.state`.
"""
import logging
from typing import Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLAlchemy engine and session factory."""

    def __init__(self, url: str, create_schema: bool = True):
        self.url = url
        self.create_schema = create_schema
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def connect(self) -> "Database":
        if self.engine is not None:
            return self

        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.url:
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {"pool_pre_ping": True}

        self.engine = create_engine(self.url, **kwargs)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        if self.create_schema:
            # Register every model with Base.metadata before creating tables
            import app.db.models  # noqa: F401
            Base.metadata.create_all(bind=self.engine)

        logger.info("Database connected")
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database closed")

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    def ping(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False
