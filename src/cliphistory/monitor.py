# region Docstring
"""
cliphistory.monitor
Polling state machine that records clipboard changes into the history store.
Overview:
    - Each tick walks: Idle -> Sampling -> (Idle | Classifying) -> Deduplicating
      -> (Idle | Persisting) -> Idle.
    - Sampling compares the clipboard change counter with the last observed
      value; an unchanged counter ends the tick without reading content.
    - Classifying reads the typed content: file reference first, then
      non-empty text, otherwise the unsupported sentinel.
    - Deduplicating compares the classified content with the single most
      recent stored item, verbatim and ignoring kind. Only one step back is
      checked: copying A, B, then A again records three items.
    - Persisting inserts the item. The dedup check and insert run under the
      store lock so a concurrent delete cannot interleave with them.
Contents:
    - MonitorState: enumeration of the states above.
    - MonitorLoop:
        - tick() -> Optional[HistoryItem]: one synchronous cycle.
        - start() / stop(): run ticks every poll_interval on a daemon thread.
        - paused(): block ticks while a clear-then-write sequence runs, so
          the intermediate empty clipboard is never sampled.
Design Notes:
    - The initial counter is sampled at construction, so whatever is on the
      clipboard at startup is not recorded.
    - Storage and clipboard errors end the tick and are logged; the next tick
      proceeds normally. A tick that cannot get the store within
      persist_timeout is skipped with a warning. Other storage failures are
      also published as STORAGE_ERROR when a notification channel is given.
"""
# endregion
# region Imports
import threading
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from logging import Logger as T_Logger
from typing import Callable, Iterator, Optional

from cliphistory.clipboard import ClipboardSource, classify
from cliphistory.config import ClipboardWatcherSettings
from cliphistory.exceptions import ClipboardError, StorageError, StorageTimeoutError
from cliphistory.models import HistoryItem, NotificationKind
from cliphistory.notifications import NotificationChannel
from cliphistory.store import HistoryStore
from cliphistory.utils import get_time

# endregion


class MonitorState(str, Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    CLASSIFYING = "classifying"
    DEDUPLICATING = "deduplicating"
    PERSISTING = "persisting"


# region MonitorLoop
class MonitorLoop:
    __clipboard: ClipboardSource
    __store: HistoryStore
    __logger: T_Logger

    def __init__(
        self,
        clipboard: ClipboardSource,
        store: HistoryStore,
        settings: ClipboardWatcherSettings,
        logger: T_Logger,
        on_insert: Optional[Callable[[HistoryItem], None]] = None,
        clock: Callable[[], datetime] = get_time,
        notifications: Optional[NotificationChannel] = None,
    ) -> None:
        self.__clipboard = clipboard
        self.__store = store
        self.__logger = logger.getChild(self.__class__.__name__)
        self.settings = settings
        self.on_insert = on_insert
        self.clock = clock
        self.notifications = notifications
        self.state = MonitorState.IDLE
        self._last_count = self._initial_count()
        self._tick_lock = threading.RLock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _initial_count(self) -> Optional[int]:
        try:
            return self.__clipboard.change_count()
        except ClipboardError as e:
            self.__logger.warning("Clipboard unavailable at startup: %s", e)
            return None

    @property
    def last_change_count(self) -> Optional[int]:
        return self._last_count

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> Optional[HistoryItem]:
        """
        Run one polling cycle.

        Returns:
            Optional[HistoryItem]: The newly stored item, or None when nothing
                was recorded (no change, duplicate, or an error was logged).
        """
        with self._tick_lock:
            try:
                return self._tick()
            finally:
                self.state = MonitorState.IDLE

    @contextmanager
    def paused(self) -> Iterator[None]:
        """Hold off ticks while the caller mutates the clipboard in several steps."""
        with self._tick_lock:
            yield

    def _tick(self) -> Optional[HistoryItem]:
        self.state = MonitorState.SAMPLING
        try:
            count = self.__clipboard.change_count()
        except ClipboardError as e:
            self.__logger.warning("Failed to sample clipboard: %s", e)
            return None
        if count == self._last_count:
            return None
        self._last_count = count

        self.state = MonitorState.CLASSIFYING
        try:
            content = self.__clipboard.read_typed()
        except ClipboardError as e:
            self.__logger.warning("Failed to read clipboard: %s", e)
            return None
        kind, text = classify(content, self.settings.unsupported_content)
        item = HistoryItem.create(kind, text, timestamp=self.clock())

        self.state = MonitorState.DEDUPLICATING
        try:
            with self.__store.locked(timeout=self.settings.persist_timeout):
                latest = self.__store.latest()
                if latest is not None and latest.content == item.content:
                    self.__logger.debug("Clipboard content unchanged; skipping duplicate.")
                    return None
                self.state = MonitorState.PERSISTING
                self.__store.insert(item)
        except StorageTimeoutError as e:
            self.__logger.warning("Skipping tick: %s", e)
            return None
        except StorageError as e:
            self.__logger.error("Failed to record clipboard change: %s", e)
            if self.notifications is not None:
                self.notifications.publish(NotificationKind.STORAGE_ERROR, message=str(e))
            return None

        self.__logger.info("Recorded %s item %s.", item.kind.value, item.id)
        if self.on_insert is not None:
            self.on_insert(item)
        return item

    # region Scheduling

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="cliphistory-monitor", daemon=True
        )
        self._thread.start()
        self.__logger.info(
            "Clipboard monitor started (every %ss).", self.settings.poll_interval
        )

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            self.__logger.info("Clipboard monitor stopped.")

    def _run(self) -> None:
        while not self._stop_event.wait(self.settings.poll_interval):
            try:
                self.tick()
            except Exception:
                # Keep polling; the next tick retries naturally.
                self.__logger.exception("Unexpected error in clipboard monitor tick.")

    # endregion


# endregion
