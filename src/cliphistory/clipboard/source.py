# region Docstring
"""
cliphistory.clipboard.source
Clipboard abstraction consumed by the monitor and the paste-back service.
Overview:
- ClipboardSource is the contract every clipboard backend implements: a
    change counter, a typed read, typed writes and clear.
- ClipboardContent is what a typed read returns: the file references the
    clipboard exposes (if any) and its plain text (if any).
- classify() turns a typed read into a content kind and the string to store.
Design Notes:
- change_count() must never decrease, and must increase on any mutation by any
    process, including writes made through this interface.
- Only the monitor and the paste-back service touch a ClipboardSource.
"""
# endregion
# region Imports
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cliphistory.models import ContentKind

# endregion


class ClipboardContent(BaseModel):
    """Snapshot of the typed representations currently on the clipboard."""

    file_paths: list[str] = Field(
        default_factory=list, description="File references, in clipboard order"
    )
    text: Optional[str] = Field(None, description="Plain text representation")

    model_config = ConfigDict(frozen=True)


class ClipboardSource(ABC):
    """Contract for clipboard backends."""

    @abstractmethod
    def change_count(self) -> int:
        """Monotonic counter that increases on every clipboard mutation."""
        ...

    @abstractmethod
    def read_typed(self) -> Optional[ClipboardContent]:
        """Read the current content, or None when nothing can be read.

        Raises:
            ClipboardError: If the backend failed.
        """
        ...

    @abstractmethod
    def write_text(self, text: str) -> None: ...

    @abstractmethod
    def write_file_reference(self, path: str) -> None:
        """Place a reference to path on the clipboard; the file need not exist."""
        ...

    @abstractmethod
    def clear(self) -> None: ...


def classify(
    content: Optional[ClipboardContent], unsupported_content: str
) -> tuple[ContentKind, str]:
    """
    Classify a clipboard read.

    File references win over text because a clipboard holding a file usually
    also exposes the path as text.

    Example:
        >>> classify(ClipboardContent(file_paths=["/tmp/a.txt"], text="/tmp/a.txt"), "?")
        (<ContentKind.FILE_PATH: 'filePath'>, '/tmp/a.txt')
        >>> classify(ClipboardContent(text=""), "?")
        (<ContentKind.UNSUPPORTED: 'unsupported'>, '?')
    """
    if content is not None:
        if content.file_paths:
            return ContentKind.FILE_PATH, content.file_paths[0]
        if content.text:
            return ContentKind.TEXT, content.text
    return ContentKind.UNSUPPORTED, unsupported_content
