from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cliphistory.utils import get_time


class NotificationKind(str, Enum):
    HISTORY_CHANGED = "history_changed"
    STORAGE_ERROR = "storage_error"
    CLIPBOARD_ERROR = "clipboard_error"
    OPEN_FAILED = "open_failed"
    HIDE_REQUESTED = "hide_requested"


class Notification(BaseModel):
    """
    Event published by the core for presentation layers to render.
    Attributes:
        kind (NotificationKind): What happened.
        message (Optional[str]): Human readable detail.
        item_id (Optional[str]): History item the event concerns, if any.
        created_at (datetime): When the event was published.
    """

    kind: NotificationKind = Field(..., description="What happened")
    message: Optional[str] = Field(None, description="Human readable detail")
    item_id: Optional[str] = Field(
        None, description="History item the event concerns, if any"
    )
    created_at: datetime = Field(
        default_factory=get_time, description="When the event was published"
    )

    model_config = ConfigDict(frozen=True)
