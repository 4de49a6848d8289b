"""
cliphistory.models
Single import point for the history models.

Exports:
- entities: SQLAlchemy entity class names
- models: Pydantic model and enumeration names
"""

from .history_item import ContentKind, HistoryItem, HistoryItemEntity  # noqa: F401
from .notification import Notification, NotificationKind  # noqa: F401

entities = ["HistoryItemEntity"]
"""
Entity classes for database persistence.
"""

models = ["ContentKind", "HistoryItem", "Notification", "NotificationKind"]
"""
Pydantic model classes for application logic and I/O.
"""

__all__ = entities + models
