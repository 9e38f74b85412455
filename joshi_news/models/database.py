"""Database engine and session management."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from . import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns a SQLAlchemy engine and hands out sessions.

    Usable as a context manager; the session is committed on clean exit
    and rolled back when the block raises.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, echo=echo, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._session: Optional[Session] = None
        Base.metadata.create_all(self.engine)

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = self.SessionLocal()
        return self._session

    def get_session(self) -> Session:
        return self.SessionLocal()

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        self.engine.dispose()

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._session is not None:
            if exc_type is None:
                self._session.commit()
            else:
                logger.warning(f"Rolling back session after error: {exc}")
                self._session.rollback()
        self.close()
        return False
