"""
cliphistory.clipboard
Clipboard backends and content classification.

Contents:
- ClipboardSource: abstract backend contract.
- ClipboardContent: typed read result.
- classify: maps a read to (ContentKind, stored content).
- MemoryClipboard: in-process backend for tests and headless use.
- PyperclipClipboard: operating system clipboard via pyperclip.
"""

from .memory import MemoryClipboard  # noqa: F401
from .source import ClipboardContent, ClipboardSource, classify  # noqa: F401
from .system import PyperclipClipboard  # noqa: F401

__all__ = [
    "ClipboardContent",
    "ClipboardSource",
    "MemoryClipboard",
    "PyperclipClipboard",
    "classify",
]
