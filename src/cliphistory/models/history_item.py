# region Docstring
"""
cliphistory.models.history_item
Persistence and domain models for clipboard history entries.
Overview:
- Provides a SQLAlchemy entity that persists one recorded clipboard change.
- Provides a frozen Pydantic model mirroring the entity for safe use outside the
    store, plus the ContentKind enumeration.
Contents:
- Enumerations:
    - ContentKind:
        Closed set of content kinds (text, filePath, unsupported). The raw value
        is what the database stores; ContentKind.from_raw maps any stored value,
        including unknown ones from older or newer schemas, to a member.
- SQLAlchemy entities:
    - HistoryItemEntity:
        Stores the item's public id, UTC timestamp, raw kind tag and content.
        The integer seq primary key records insertion order and breaks
        timestamp ties.
- Pydantic models:
    - HistoryItem:
        Immutable domain model. kind is derived from kind_raw at read time and
        preview renders a short label for list surfaces.
Design notes:
- Items are never updated; the store only inserts and deletes.
- Timestamps are stored as naive UTC and exposed as aware UTC.
"""
# endregion
# region Imports
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cliphistory.database import Base
from cliphistory.utils import from_storage_time, get_time, to_storage_time

# endregion

PREVIEW_LENGTH = 50


# region ContentKind
class ContentKind(str, Enum):
    TEXT = "text"
    FILE_PATH = "filePath"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "ContentKind":
        """Map a stored tag to a kind; unrecognized tags become UNSUPPORTED."""
        try:
            return cls(raw)
        except ValueError:
            return cls.UNSUPPORTED


# endregion
# region SQLAlchemy Model
class HistoryItemEntity(Base):
    """
    Model representing a recorded clipboard change.
    Attributes:
        seq (int): Autoincrement primary key; insertion order.
        id (str): Public identifier (uuid4).
        timestamp (datetime): When the change was recorded (naive UTC).
        kind_raw (str): Stored ContentKind tag.
        content (str): Text payload, file path, or the unsupported sentinel.
    """

    __tablename__ = "clipboard_history"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    kind_raw: Mapped[str] = mapped_column(String(50), nullable=False, default="text")
    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<HistoryItem(id={self.id}, kind='{self.kind_raw}', timestamp={self.timestamp})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoryItemEntity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def from_model(cls, item: "HistoryItem") -> "HistoryItemEntity":
        return cls(
            id=item.id,
            timestamp=to_storage_time(item.timestamp),
            kind_raw=item.kind_raw,
            content=item.content,
        )

    @property
    def model(self) -> "HistoryItem":
        return HistoryItem(
            id=self.id,
            timestamp=from_storage_time(self.timestamp),
            kind_raw=self.kind_raw,
            content=self.content,
        )


# endregion
# region Pydantic Model
class HistoryItem(BaseModel):
    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="The unique ID of the history item",
    )
    timestamp: datetime = Field(
        default_factory=get_time,
        description="When the clipboard change was recorded",
    )
    kind_raw: str = Field(
        ContentKind.TEXT.value, description="Stored content kind tag"
    )
    content: str = Field(
        ..., description="Text payload, file path, or the unsupported sentinel"
    )

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "6f1c2a7e-3f55-4c36-9d8b-2f3f8c0f4b1a",
                    "timestamp": "2024-01-01T12:00:00Z",
                    "kind_raw": "text",
                    "content": "Sample clipboard text",
                }
            ]
        },
    )

    @classmethod
    def create(
        cls,
        kind: ContentKind,
        content: str,
        timestamp: Optional[datetime] = None,
    ) -> "HistoryItem":
        if timestamp is None:
            return cls(kind_raw=kind.value, content=content)
        return cls(kind_raw=kind.value, content=content, timestamp=timestamp)

    @property
    def kind(self) -> ContentKind:
        return ContentKind.from_raw(self.kind_raw)

    @property
    def preview(self) -> str:
        """Short label: the file name for paths, truncated text otherwise."""
        if self.kind is ContentKind.FILE_PATH:
            return PurePath(self.content).name or self.content
        if len(self.content) > PREVIEW_LENGTH:
            return self.content[:PREVIEW_LENGTH] + "..."
        return self.content


# endregion

__all__ = ["ContentKind", "HistoryItemEntity", "HistoryItem"]
