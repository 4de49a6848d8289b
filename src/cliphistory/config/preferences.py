# region Docstring
"""
cliphistory.config.preferences
Persisted user preferences, currently the history retention window.
Overview:
- RetentionConfig is the loaded preference. retention_days is None when the
    user has never chosen a value, 0 when the user chose "forever", and a
    positive number of days otherwise.
- RetentionSettingsStore reads and writes the preference in a key/value table
    of a sqlite-utils Database. Writes are immediate.
Design Notes:
- Keeping "not configured" (None) apart from "forever" (0) means the default
    window only applies to users who never picked one.
"""
# endregion
# region Imports
from logging import Logger as T_Logger
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlite_utils import Database
from sqlite_utils.db import NotFoundError

# endregion

DEFAULT_RETENTION_DAYS = 30
"""Retention window applied until the user picks one."""

RETENTION_CHOICES = (7, 30, 90, 0)
"""Windows offered by settings surfaces; 0 is "forever"."""

_TABLE = "preferences"
_RETENTION_KEY = "retention_days"


class RetentionConfig(BaseModel):
    """Loaded retention preference."""

    retention_days: Optional[int] = Field(
        None,
        ge=0,
        description="Stored retention window in days; None when never configured, 0 for forever.",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def is_configured(self) -> bool:
        return self.retention_days is not None

    @property
    def effective_days(self) -> int:
        """Window to enforce, falling back to the default when unconfigured."""
        if self.retention_days is None:
            return DEFAULT_RETENTION_DAYS
        return self.retention_days

    @property
    def retains_forever(self) -> bool:
        return self.effective_days == 0


class RetentionSettingsStore:
    """Reads and persists the retention window preference."""

    __db: Database
    __logger: T_Logger

    def __init__(self, db: Database, logger: T_Logger) -> None:
        self.__db = db
        self.__logger = logger.getChild(self.__class__.__name__)

    def load(self) -> RetentionConfig:
        table = self.__db[_TABLE]
        if not table.exists():
            self.__logger.debug("No preferences table yet; retention not configured.")
            return RetentionConfig()
        try:
            row = table.get(_RETENTION_KEY)
        except NotFoundError:
            self.__logger.debug("Retention window not configured.")
            return RetentionConfig()
        return RetentionConfig(retention_days=int(row["value"]))

    def save(self, retention_days: int) -> RetentionConfig:
        """Validate and persist a new retention window; returns the stored config."""
        config = RetentionConfig(retention_days=retention_days)
        self.__db[_TABLE].upsert(
            {"key": _RETENTION_KEY, "value": config.retention_days},
            pk="key",
        )
        self.__logger.info("Retention window set to %s days.", config.retention_days)
        return config
