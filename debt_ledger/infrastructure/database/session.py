"""Database handle: engine, connection pool and session factory with an explicit lifecycle"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from debt_ledger.config import settings
from debt_ledger.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and its connection pool.

    Opened once at process start (or per test), passed to whatever needs
    sessions, and disposed at shutdown.
    """

    def __init__(self, url: str | None = None, **engine_kwargs):
        self.url = url or settings.database_url
        self.engine = self._create_engine(self.url, **engine_kwargs)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @staticmethod
    def _create_engine(url: str, **engine_kwargs) -> Engine:
        if url.startswith("sqlite"):
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False, "timeout": 30},
                **engine_kwargs,
            )
            _enable_sqlite_foreign_keys(engine)
            return engine

        # Pool: recycle after an hour to avoid stale connections
        engine_kwargs.setdefault("pool_pre_ping", True)
        engine_kwargs.setdefault("pool_size", settings.db_pool_size)
        engine_kwargs.setdefault("max_overflow", settings.db_max_overflow)
        engine_kwargs.setdefault("pool_recycle", settings.db_pool_recycle)
        return create_engine(url, **engine_kwargs)

    def create_all(self) -> None:
        """Create any missing tables"""
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> None:
        """Raise if the database is unreachable"""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session scope; uncommitted work is rolled back on close"""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed", extra={"database": self.engine.url.render_as_string()})


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite leaves ON DELETE actions off unless asked per connection"""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    """Dependency injection for database sessions"""
    database: Database = request.app.state.database
    with database.session() as db:
        yield db
