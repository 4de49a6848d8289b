"""Exceptions raised by the clipboard history recorder."""

from pathlib import Path
from typing import Union


class ClipHistoryError(Exception):
    """Base exception for clipboard history errors."""

    pass


class StorageError(ClipHistoryError):
    """The history database failed to complete an operation."""

    pass


class StorageTimeoutError(StorageError):
    """The history store could not be acquired within the allowed time."""

    pass


class ClipboardError(ClipHistoryError):
    """The clipboard backend is unavailable or failed."""

    pass


class OpenFailure(ClipHistoryError):
    """The operating system declined to open a referenced file."""

    def __init__(self, path: Union[str, Path], reason: str = "") -> None:
        self.path = str(path)
        self.reason = reason
        message = f"Unable to open file: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
