"""
cliphistory.notifications
Thread-safe one-shot event channel between the core and presentation layers.

The monitor thread and user actions publish; a UI (or the CLI) consumes with
get() or drain(). Each notification is delivered once. The channel holds at
most maxsize events; when full, the oldest is dropped to make room.
"""

import queue
from typing import Optional

from cliphistory.models import Notification, NotificationKind

DEFAULT_MAXSIZE = 100


class NotificationChannel:
    def __init__(self, maxsize: int = DEFAULT_MAXSIZE) -> None:
        self._queue: "queue.Queue[Notification]" = queue.Queue(maxsize=maxsize)

    def publish(
        self,
        kind: NotificationKind,
        message: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(kind=kind, message=message, item_id=item_id)
        try:
            self._queue.put_nowait(notification)
        except queue.Full:
            # Oldest event gives way when a bounded channel is not being drained.
            self._queue.get_nowait()
            self._queue.put_nowait(notification)
        return notification

    def get(self, timeout: Optional[float] = None) -> Optional[Notification]:
        """Next notification, or None if none arrives within timeout."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[Notification]:
        items: list[Notification] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def __len__(self) -> int:
        return self._queue.qsize()
