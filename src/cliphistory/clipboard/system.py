# region Docstring
"""
cliphistory.clipboard.system
Operating system clipboard backed by pyperclip.
Overview:
- pyperclip only exchanges plain text, so PyperclipClipboard derives the change
    counter by hashing the clipboard text on each sample and bumping the
    counter when the digest differs from the previous sample.
- File references travel as file:// URIs, one per line (the text/uri-list
    convention used by desktop file managers). A clipboard whose non-empty
    lines are all file:// URIs is read as file references.
Design Notes:
- Writes made through this class bump the counter immediately so a monitor
    sharing the instance observes them like any other mutation.
- pyperclip failures are re-raised as ClipboardError.
"""
# endregion
# region Imports
import threading
from hashlib import sha256
from logging import Logger as T_Logger
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import pyperclip

from cliphistory.clipboard.source import ClipboardContent, ClipboardSource
from cliphistory.exceptions import ClipboardError

# endregion


def parse_file_uris(text: str) -> list[str]:
    """
    Extract local paths when every non-empty line of text is a file:// URI.

    Example:
        >>> parse_file_uris("file:///tmp/a%20b.txt")
        ['/tmp/a b.txt']
        >>> parse_file_uris("hello")
        []
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    paths: list[str] = []
    for line in lines:
        parsed = urlparse(line)
        if parsed.scheme != "file" or not parsed.path:
            return []
        paths.append(unquote(parsed.path))
    return paths


def path_to_uri(path: str) -> str:
    """Render a path as a file:// URI; relative paths are made absolute first."""
    return Path(path).expanduser().absolute().as_uri()


class PyperclipClipboard(ClipboardSource):
    __logger: T_Logger

    def __init__(self, logger: T_Logger) -> None:
        self.__logger = logger.getChild(self.__class__.__name__)
        self._lock = threading.Lock()
        self._count = 0
        self._digest: Optional[str] = None

    def change_count(self) -> int:
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            self.__logger.debug("Clipboard not readable: %s", e)
            with self._lock:
                return self._count
        digest = sha256((text or "").encode("utf-8")).hexdigest()
        with self._lock:
            if digest != self._digest:
                self._digest = digest
                self._count += 1
            return self._count

    def read_typed(self) -> Optional[ClipboardContent]:
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Failed to read clipboard: {e}") from e
        if text is None:
            return None
        return ClipboardContent(file_paths=parse_file_uris(text), text=text)

    def write_text(self, text: str) -> None:
        self._copy(text)

    def write_file_reference(self, path: str) -> None:
        self._copy(path_to_uri(path))

    def clear(self) -> None:
        self._copy("")

    def _copy(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Failed to write clipboard: {e}") from e
        with self._lock:
            self._digest = sha256(text.encode("utf-8")).hexdigest()
            self._count += 1
