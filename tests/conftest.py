import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlite_utils import Database

from cliphistory.clipboard import MemoryClipboard
from cliphistory.config import (
    AppSettings,
    ClipboardWatcherSettings,
    DatabaseSettings,
    RetentionSettingsStore,
)
from cliphistory.database import Base, DatabaseSessionGenerator
from cliphistory.exceptions import OpenFailure
from cliphistory.paste_back import FileOpener
from cliphistory.store import HistoryStore

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeOpener(FileOpener):
    """Opens only paths that exist on disk; records every successful open."""

    def __init__(self) -> None:
        self.opened: list[str] = []

    def open(self, path: str) -> None:
        if not Path(path).exists():
            raise OpenFailure(path, "file does not exist")
        self.opened.append(path)


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("cliphistory.tests")


@pytest.fixture
def db_session():
    """In-memory history database, fresh for each test."""
    generator = DatabaseSessionGenerator(
        DatabaseSettings(database_url="sqlite:///:memory:")
    )
    generator.init_db()
    try:
        yield generator
    finally:
        Base.metadata.drop_all(bind=generator.engine)
        generator.dispose()


@pytest.fixture
def store(db_session, logger) -> HistoryStore:
    return HistoryStore(db_session, logger)


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def watcher_settings() -> ClipboardWatcherSettings:
    return ClipboardWatcherSettings(
        poll_interval=0.01,
        recent_limit=10,
        persist_timeout=0.2,
        unsupported_content="Unsupported content type.",
    )


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    return AppSettings(app_root=tmp_path, log_level="debug")


@pytest.fixture
def retention_store(logger) -> RetentionSettingsStore:
    return RetentionSettingsStore(Database(memory=True), logger)
