import threading
from typing import Iterable, Optional

from cliphistory.clipboard.source import ClipboardContent, ClipboardSource


class MemoryClipboard(ClipboardSource):
    """
    In-process clipboard with a real change counter.

    Used for headless runs and tests. copy_text, copy_files and reaffirm stand
    in for other applications writing to the clipboard.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._content: Optional[ClipboardContent] = None

    def change_count(self) -> int:
        with self._lock:
            return self._count

    def read_typed(self) -> Optional[ClipboardContent]:
        with self._lock:
            return self._content

    def write_text(self, text: str) -> None:
        self._set(ClipboardContent(text=text))

    def write_file_reference(self, path: str) -> None:
        self._set(ClipboardContent(file_paths=[path], text=path))

    def clear(self) -> None:
        self._set(None)

    # region External writers

    def copy_text(self, text: str) -> None:
        self.write_text(text)

    def copy_files(self, paths: Iterable[str], text: Optional[str] = None) -> None:
        self._set(ClipboardContent(file_paths=list(paths), text=text))

    def copy_unreadable(self) -> None:
        """Simulate content with no text or file representation (e.g. an image)."""
        self._set(ClipboardContent())

    def reaffirm(self) -> None:
        """Bump the counter without changing the content."""
        with self._lock:
            self._count += 1

    # endregion

    def _set(self, content: Optional[ClipboardContent]) -> None:
        with self._lock:
            self._content = content
            self._count += 1
