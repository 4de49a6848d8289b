# region Docstring
"""
cliphistory.service
Facade that presentation layers (menus, settings panels, the CLI) drive.
Overview:
    - Wires the history store, retention preference, clipboard, monitor and
      paste-back service together.
    - Keeps an observable, bounded "recent items" view refreshed after every
      write, and a notification channel for one-shot events.
Contents:
    - ClipboardHistoryService:
        - from_settings(...): build from the configured settings.
        - initialize(start_monitor=True, prune_on_start=True): create tables,
          prune per the stored retention window, load the recent view, start
          polling.
        - shutdown(): stop polling.
        - recent_items / subscribe(callback): the recent view.
        - history(), recent_history(limit), get_item(item_id)
        - force_prune(), clear_all(), delete_item(item_id)
        - paste_item(item, open_file)
        - retention / set_retention_days(days)
Design Notes:
    - User actions never raise StorageError, ClipboardError or OpenFailure:
      they are logged, published on the notification channel, and the action
      returns a falsy result. The recent view may be stale until the next
      successful refresh.
    - All store writes go through HistoryStore's lock, which the monitor also
      holds across its dedup check and insert.
"""
# endregion
# region Imports
import threading
from datetime import datetime
from logging import Logger as T_Logger
from typing import Callable, Optional

from cliphistory.clipboard import ClipboardSource, PyperclipClipboard
from cliphistory.config import (
    AppSettings,
    ClipboardWatcherSettings,
    DatabaseSettings,
    PreferencesSettings,
    RetentionConfig,
    RetentionSettingsStore,
    get_settings,
)
from cliphistory.database import DatabaseSessionGenerator as DBSession
from cliphistory.exceptions import ClipboardError, OpenFailure, StorageError
from cliphistory.models import HistoryItem, NotificationKind
from cliphistory.monitor import MonitorLoop
from cliphistory.notifications import NotificationChannel
from cliphistory.paste_back import FileOpener, PasteBackService, SystemFileOpener
from cliphistory.retention import prune
from cliphistory.store import HistoryStore
from cliphistory.utils import get_time

# endregion

RecentCallback = Callable[[tuple[HistoryItem, ...]], None]


# region ClipboardHistoryService
class ClipboardHistoryService:
    __logger: T_Logger

    def __init__(
        self,
        db_session: DBSession,
        retention_store: RetentionSettingsStore,
        clipboard: ClipboardSource,
        opener: FileOpener,
        watcher_settings: ClipboardWatcherSettings,
        app_settings: AppSettings,
        logger: T_Logger,
        notifications: Optional[NotificationChannel] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.__logger = logger.getChild(self.__class__.__name__)
        self.db_session = db_session
        self.notifications = notifications or NotificationChannel()
        self.clock = clock or (lambda: get_time(app_settings.tz))
        self.watcher_settings = watcher_settings
        self.store = HistoryStore(db_session, logger)
        self.retention_store = retention_store
        self.clipboard = clipboard
        self.monitor = MonitorLoop(
            clipboard,
            self.store,
            watcher_settings,
            logger,
            on_insert=self._on_insert,
            clock=self.clock,
            notifications=self.notifications,
        )
        self.paste_back = PasteBackService(
            clipboard, opener, logger, notifications=self.notifications
        )
        self._retention = RetentionConfig()
        self._recent: tuple[HistoryItem, ...] = ()
        self._recent_lock = threading.Lock()
        self._subscribers: list[RecentCallback] = []

    @classmethod
    def from_settings(
        cls,
        logger: T_Logger,
        clipboard: Optional[ClipboardSource] = None,
        opener: Optional[FileOpener] = None,
    ) -> "ClipboardHistoryService":
        """Build a service from the configured settings and the system clipboard."""
        preferences = get_settings(PreferencesSettings)
        return cls(
            db_session=DBSession(get_settings(DatabaseSettings)),
            retention_store=RetentionSettingsStore(preferences.preferences_db, logger),
            clipboard=clipboard or PyperclipClipboard(logger),
            opener=opener or SystemFileOpener(),
            watcher_settings=get_settings(ClipboardWatcherSettings),
            app_settings=get_settings(AppSettings),
            logger=logger,
        )

    # region Lifecycle

    def initialize(self, start_monitor: bool = True, prune_on_start: bool = True) -> None:
        self.db_session.init_db()
        self._retention = self.retention_store.load()
        if prune_on_start:
            self.force_prune()
        self.refresh_recent()
        if start_monitor:
            self.monitor.start()
        self.__logger.info(
            "Clipboard history initialized (retention: %s days).",
            self._retention.effective_days,
        )

    def shutdown(self) -> None:
        self.monitor.stop()

    # endregion
    # region Recent view

    @property
    def recent_items(self) -> tuple[HistoryItem, ...]:
        with self._recent_lock:
            return self._recent

    def subscribe(self, callback: RecentCallback) -> Callable[[], None]:
        """Call callback with the recent view whenever it changes; returns an unsubscribe function."""
        with self._recent_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._recent_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def refresh_recent(self) -> tuple[HistoryItem, ...]:
        try:
            items = tuple(self.store.fetch_recent(self.watcher_settings.recent_limit))
        except StorageError as e:
            self._report_storage_error(e)
            return self.recent_items
        with self._recent_lock:
            changed = items != self._recent
            self._recent = items
            subscribers = list(self._subscribers)
        if changed:
            self.notifications.publish(NotificationKind.HISTORY_CHANGED)
            for callback in subscribers:
                callback(items)
        return items

    def _on_insert(self, item: HistoryItem) -> None:
        self.refresh_recent()

    # endregion
    # region Queries

    def history(self) -> list[HistoryItem]:
        try:
            return self.store.fetch_all()
        except StorageError as e:
            self._report_storage_error(e)
            return []

    def recent_history(self, limit: int) -> list[HistoryItem]:
        """The newest limit items, read without loading the whole table."""
        try:
            return self.store.fetch_recent(limit)
        except StorageError as e:
            self._report_storage_error(e)
            return []

    def get_item(self, item_id: str) -> Optional[HistoryItem]:
        try:
            return self.store.get(item_id)
        except StorageError as e:
            self._report_storage_error(e)
            return None

    # endregion
    # region Actions

    def force_prune(self) -> int:
        self._retention = self.retention_store.load()
        try:
            deleted = prune(self.store, self._retention, self.clock(), self.__logger)
        except StorageError as e:
            self._report_storage_error(e)
            return 0
        if deleted:
            self.refresh_recent()
        return deleted

    def clear_all(self) -> int:
        try:
            deleted = self.store.delete_all()
        except StorageError as e:
            self._report_storage_error(e)
            return 0
        self.refresh_recent()
        return deleted

    def delete_item(self, item_id: str) -> bool:
        try:
            deleted = self.store.delete_by_id(item_id)
        except StorageError as e:
            self._report_storage_error(e)
            return False
        if deleted:
            self.refresh_recent()
        return deleted

    def paste_item(self, item: HistoryItem, open_file: bool = False) -> bool:
        try:
            with self.monitor.paused():
                return self.paste_back.paste(item, open_file=open_file)
        except OpenFailure as e:
            self.__logger.warning("%s", e)
            self.notifications.publish(
                NotificationKind.OPEN_FAILED,
                message=(
                    f"The file could not be opened:\n\n{e.path}\n\n"
                    "It may be restricted by permissions or no longer exist."
                ),
                item_id=item.id,
            )
            return False
        except ClipboardError as e:
            self.__logger.error("%s", e)
            self.notifications.publish(
                NotificationKind.CLIPBOARD_ERROR, message=str(e), item_id=item.id
            )
            return False

    # endregion
    # region Retention

    @property
    def retention(self) -> RetentionConfig:
        return self._retention

    def set_retention_days(self, retention_days: int) -> RetentionConfig:
        """
        Persist a new retention window.

        Raises:
            pydantic.ValidationError: If retention_days is negative.
        """
        self._retention = self.retention_store.save(retention_days)
        return self._retention

    # endregion

    def _report_storage_error(self, error: StorageError) -> None:
        self.__logger.error("Storage error: %s", error)
        self.notifications.publish(NotificationKind.STORAGE_ERROR, message=str(error))


# endregion
