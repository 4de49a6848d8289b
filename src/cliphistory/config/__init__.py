"""
cliphistory.config
Configuration and settings management for the clipboard history recorder.
Overview:
- Provides Pydantic-based settings classes for each component.
- Each settings class inherits from FactoryBaseSettings and supports environment
    variable overrides via Field aliases.
Contents:
- Settings Classes:
    - AppSettings:
        Application root, environment, time zone and log level.
    - ClipboardWatcherSettings:
        Poll interval, recent view size, persistence timeout and the sentinel
        stored for unsupported clipboard content.
    - DatabaseSettings:
        SQLAlchemy URL of the history database.
    - PreferencesSettings:
        Location of the sqlite-utils preferences database holding user choices
        such as the retention window.
- Retention preferences (re-exported from .preferences):
    - RetentionConfig, RetentionSettingsStore, RETENTION_CHOICES,
        DEFAULT_RETENTION_DAYS.
Design Notes:
- Default values allow zero-configuration startup; everything lives under
    APP_ROOT unless overridden.
- The retention window is a user preference, not deployment configuration, so
    it is persisted by RetentionSettingsStore rather than read from env/YAML.
"""

from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from sqlite_utils import Database

from cliphistory.config.base import APP_ENV, APP_ROOT
from cliphistory.config.factory import FactoryBaseSettings
from cliphistory.config.factory import get_settings  # noqa: F401  This is used externally
from cliphistory.config.preferences import (  # noqa: F401
    DEFAULT_RETENTION_DAYS,
    RETENTION_CHOICES,
    RetentionConfig,
    RetentionSettingsStore,
)


class AppSettings(FactoryBaseSettings):
    """Application configuration settings."""

    app_root: Path = Field(
        default=APP_ROOT,
        description="Root directory for application data storage.",
        alias="CLIPHISTORY_HOME",
    )
    environment: str = Field(
        default=APP_ENV,
        description="Current application environment (prod, dev, test).",
        alias="CLIPHISTORY_ENV",
    )
    timezone_name: Optional[str] = Field(
        default=None,
        description="IANA time zone used for calendar-day retention arithmetic. [Default: system local]",
        alias="CLIPHISTORY_TIMEZONE",
    )
    log_level: str = Field(
        default="info",
        description="Log level for the application.",
        alias="CLIPHISTORY_LOG_LEVEL",
    )

    @property
    def logs_dir(self) -> Path:
        """Base directory for logs."""
        return self.app_root / "logs"

    @field_validator("timezone_name", mode="before")
    def validate_timezone(cls, v):
        if v in (None, ""):
            return None
        try:
            ZoneInfo(str(v))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return str(v)

    @property
    def tz(self) -> Optional[ZoneInfo]:
        """Configured time zone, or None for the host's IANA zone (see utils.local_zone)."""
        return ZoneInfo(self.timezone_name) if self.timezone_name else None


class ClipboardWatcherSettings(FactoryBaseSettings):
    """
    Configuration for the clipboard monitor.
    """

    poll_interval: float = Field(
        default=0.1,
        gt=0,
        description="Interval for polling the clipboard. (Seconds) [Default: 0.1]",
        alias="CLIPBOARD_WATCHER_POLL_INTERVAL",
    )
    recent_limit: int = Field(
        default=10,
        gt=0,
        description="Number of items kept in the recent items view. [Default: 10]",
        alias="CLIPBOARD_WATCHER_RECENT_LIMIT",
    )
    persist_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Seconds a tick waits for the history store before skipping. [Default: 2.0]",
        alias="CLIPBOARD_WATCHER_PERSIST_TIMEOUT",
    )
    unsupported_content: str = Field(
        default="Unsupported content type.",
        description="Sentinel content stored for clipboard data that is neither text nor a file.",
        alias="CLIPBOARD_WATCHER_UNSUPPORTED_CONTENT",
    )


class DatabaseSettings(FactoryBaseSettings):
    """
    History database configuration settings.
    """

    database_url: str = Field(
        default=f"sqlite:///{(APP_ROOT / 'history.db').as_posix()}",
        alias="CLIPHISTORY_DATABASE_URL",
        description="SQLAlchemy URL of the history database.",
    )
    echo: bool = Field(
        default=False,
        alias="CLIPHISTORY_DATABASE_ECHO",
        description="Log every SQL statement issued by the engine.",
    )


class PreferencesSettings(FactoryBaseSettings):
    """
    User preferences storage settings.
    """

    preferences_db_path: Path = Field(
        default=APP_ROOT / "preferences.db",
        description="Path to the SQLite database file holding user preferences.",
        alias="CLIPHISTORY_PREFERENCES_DB",
    )

    @property
    def preferences_db(self) -> Database:
        """SQLite database instance for user preferences."""
        self.preferences_db_path.parent.mkdir(parents=True, exist_ok=True)
        return Database(self.preferences_db_path)
