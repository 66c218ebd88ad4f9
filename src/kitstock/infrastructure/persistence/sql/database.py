"""SQLAlchemy engine, session factory and transactional scope.

``Database`` wraps one engine so tests can run several isolated in-memory
databases side by side.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kitstock.infrastructure.persistence.sql.models import Base
from kitstock.logging_config import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:

    def __init__(self, database_url: str, echo: bool = False) -> None:
        kwargs: dict = {"echo": echo}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # One shared connection, otherwise every session sees an empty database.
            kwargs.update(
                connect_args={"check_same_thread": False}, poolclass=StaticPool
            )
        self.engine: Engine = create_engine(database_url, **kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.debug("Engine initialized for dialect {}", self.engine.dialect.name)

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Commit on normal exit, roll back and re-raise on exception."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            logger.debug("Transaction rolled back")
            raise
        finally:
            session.close()
