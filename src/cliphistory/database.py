"""
cliphistory.database

Shared SQLAlchemy declarative base and session management.

Overview:
- Provides a single `declarative_base()` instance (`Base`) inherited by the ORM
    entity classes.
- Includes a utility class for generating SQLAlchemy sessions bound to the
    configured engine.

Contents:
- Base:
    Singleton `declarative_base` instance.

- DatabaseSessionGenerator:
    - __init__(settings: DatabaseSettings):
        Creates the engine from the provided DatabaseSettings. SQLite file
        databases get their parent directory created; in-memory SQLite uses a
        StaticPool so every session shares one connection.
    - get_session() -> Session:
        Creates a new synchronous SQLAlchemy session.
    - init_db():
        Creates all tables defined in the ORM models.
    - dispose():
        Releases pooled connections.

Design Notes:
- Centralizing the declarative base avoids circular imports and ensures all
    models share one MetaData instance.
- check_same_thread is disabled for SQLite because the monitor thread and
    user actions share the engine; the history store serializes access.
"""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from cliphistory.config import DatabaseSettings


Base = declarative_base()
"""Singleton `declarative_base` instance for ORM models."""


class DatabaseSessionGenerator:
    """
    Utility class to generate SQLAlchemy sessions bound to a specific engine.

    Attributes:
        engine (sqlalchemy.engine.Engine): The SQLAlchemy engine to bind sessions to.
    """

    def __init__(self, settings: DatabaseSettings):
        url = make_url(settings.database_url)
        kwargs: dict = {"echo": settings.echo}
        if url.get_backend_name() == "sqlite":
            kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                kwargs["poolclass"] = StaticPool
            else:
                Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(url, **kwargs)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def get_session(self):
        """
        Creates a new SQLAlchemy session bound to the configured engine.

        Returns:
            sqlalchemy.orm.Session: A new session instance.
        """
        return self._session_factory()

    def init_db(self):
        """
        Initializes the database by creating all tables defined in the ORM models.
        """
        # Register entities on Base.metadata before create_all.
        import cliphistory.models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def dispose(self):
        self.engine.dispose()
