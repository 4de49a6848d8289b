# region Docstring
"""
cliphistory.paste_back
Re-inject a stored history item into the clipboard, or open the file it refers to.
Overview:
    - FileOpener is the contract for asking the operating system to open a
      path; SystemFileOpener implements it with the platform launcher.
    - PasteBackService.paste(item, open_file) dispatches on the item kind:
        - FilePath, open_file=True: open the file; the clipboard is untouched.
        - FilePath, open_file=False: clipboard gets a file reference.
        - Text: clipboard gets the text verbatim.
        - Unsupported: nothing happens; the sentinel never reaches the clipboard.
Design Notes:
    - A failed open raises OpenFailure to the caller; the service does not
      render anything itself.
    - On success a HIDE_REQUESTED notification is published so the presenting
      surface can dismiss itself.
"""
# endregion
# region Imports
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from logging import Logger as T_Logger
from pathlib import Path
from typing import Optional

from cliphistory.clipboard import ClipboardSource
from cliphistory.exceptions import OpenFailure
from cliphistory.models import ContentKind, HistoryItem, NotificationKind
from cliphistory.notifications import NotificationChannel

# endregion


class FileOpener(ABC):
    @abstractmethod
    def open(self, path: str) -> None:
        """Open path with its default application.

        Raises:
            OpenFailure: If the path is missing, unreadable or the launcher failed.
        """
        ...


class SystemFileOpener(FileOpener):
    """Opens files with `open` (macOS), os.startfile (Windows) or `xdg-open`."""

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    def open(self, path: str) -> None:
        target = Path(path).expanduser()
        if not target.exists():
            raise OpenFailure(path, "file does not exist")
        if not os.access(target, os.R_OK):
            raise OpenFailure(path, "permission denied")
        try:
            if sys.platform == "win32":
                os.startfile(str(target))  # type: ignore[attr-defined]
                return
            launcher = "open" if sys.platform == "darwin" else "xdg-open"
            subprocess.run(
                [launcher, str(target)],
                check=True,
                timeout=self.timeout,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise OpenFailure(path, str(e)) from e


class PasteBackService:
    __clipboard: ClipboardSource
    __opener: FileOpener
    __logger: T_Logger

    def __init__(
        self,
        clipboard: ClipboardSource,
        opener: FileOpener,
        logger: T_Logger,
        notifications: Optional[NotificationChannel] = None,
    ) -> None:
        self.__clipboard = clipboard
        self.__opener = opener
        self.__notifications = notifications
        self.__logger = logger.getChild(self.__class__.__name__)

    def paste(self, item: HistoryItem, open_file: bool = False) -> bool:
        """
        Put item back on the clipboard, or open it when it is a file and open_file is set.

        Arguments:
            item (HistoryItem): The stored item.
            open_file (bool): Open a FilePath item instead of copying it.
                Ignored for other kinds.

        Returns:
            bool: True if the clipboard was written or the file opened; False
                for unsupported items.

        Raises:
            OpenFailure: If the file could not be opened.
            ClipboardError: If the clipboard write failed.
        """
        kind = item.kind
        if kind is ContentKind.FILE_PATH:
            if open_file:
                self.__opener.open(item.content)
                self.__logger.info("Opened %s.", item.content)
            else:
                self.__clipboard.clear()
                self.__clipboard.write_file_reference(item.content)
                self.__logger.info("Copied file reference %s to clipboard.", item.content)
        elif kind is ContentKind.TEXT:
            self.__clipboard.clear()
            self.__clipboard.write_text(item.content)
            self.__logger.info("Copied text item %s to clipboard.", item.id)
        else:
            self.__logger.debug("Item %s is unsupported; nothing pasted.", item.id)
            return False

        if self.__notifications is not None:
            self.__notifications.publish(NotificationKind.HIDE_REQUESTED, item_id=item.id)
        return True
