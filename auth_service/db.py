"""
Database connection and session management for the auth service
"""
from typing import Generator, Optional
import logging

from fastapi import Request
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Storage context owned by the application.

    Built once at startup and handed to whatever needs a session; nothing
    touches the engine before `open()` or after `close()`.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> None:
        if self.is_open:
            return
        connect_args = {"check_same_thread": False} if self.url.startswith("sqlite") else {}
        self.engine = create_engine(self.url, connect_args=connect_args)
        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        logger.info("Database opened: %s", self.engine.url.render_as_string(hide_password=True))

    def create_all(self) -> None:
        # Import models so their tables are registered with Base
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self._require_engine())
        logger.info(
            "Database initialized, tables: %s",
            ", ".join(sorted(inspect(self.engine).get_table_names()))
        )

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database closed")
        self.engine = None
        self._session_factory = None

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database is not open")
        return self.engine


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency yielding one session per request.

    Yields:
        Session: SQLAlchemy session bound to the application's database
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
