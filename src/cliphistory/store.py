# region Docstring
"""
cliphistory.store
Durable store for clipboard history items.
Overview:
    - HistoryStore wraps the SQLAlchemy session generator and exposes the
      operations the monitor and user actions need: insert, ordered fetches and
      the three kinds of delete.
    - Every operation runs under one re-entrant lock, so reads never interleave
      with a write and a caller can hold the lock across several operations
      (see locked()).
Contents:
    - HistoryStore:
        Methods:
            - insert(item) -> HistoryItem
            - latest() -> Optional[HistoryItem]
            - get(item_id) -> Optional[HistoryItem]
            - fetch_recent(limit) -> list[HistoryItem]
            - fetch_all() -> list[HistoryItem]
            - count() -> int
            - delete_older_than(cutoff) -> int
            - delete_all() -> int
            - delete_by_id(item_id) -> bool
            - locked(timeout) -> context manager
Design Notes:
    - Ordering is timestamp descending, then insertion order descending, so
      items sharing a timestamp come back newest-inserted first.
    - SQLAlchemy errors are logged and re-raised as StorageError; callers
      decide whether to continue. Nothing is retried here.
    - Each write commits before returning.
"""

# endregion
# region Imports
import threading
from contextlib import contextmanager
from datetime import datetime
from logging import Logger as T_Logger
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cliphistory.database import DatabaseSessionGenerator as DBSession
from cliphistory.exceptions import StorageError, StorageTimeoutError
from cliphistory.models import HistoryItem, HistoryItemEntity
from cliphistory.utils import to_storage_time

# endregion

R = TypeVar("R")

_NEWEST_FIRST = (HistoryItemEntity.timestamp.desc(), HistoryItemEntity.seq.desc())


# region History Store
class HistoryStore:
    __db_session: DBSession
    __logger: T_Logger

    def __init__(self, db_session: DBSession, logger: T_Logger) -> None:
        self.__db_session = db_session
        self.__logger = logger.getChild(self.__class__.__name__)
        self.__lock = threading.RLock()

    @contextmanager
    def locked(self, timeout: Optional[float] = None) -> Iterator["HistoryStore"]:
        """
        Hold the store lock across several operations.

        Arguments:
            timeout (Optional[float]): Seconds to wait for the lock; None waits
                indefinitely.

        Raises:
            StorageTimeoutError: If the lock was not acquired in time.
        """
        acquired = self.__lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            raise StorageTimeoutError(
                f"History store busy; lock not acquired within {timeout}s"
            )
        try:
            yield self
        finally:
            self.__lock.release()

    def _run(self, operation: str, work: Callable[[Session], R], commit: bool = False) -> R:
        with self.__lock:
            try:
                with self.__db_session.get_session() as session:
                    result = work(session)
                    if commit:
                        session.commit()
                    return result
            except SQLAlchemyError as e:
                self.__logger.error("History store %s failed: %s", operation, e, exc_info=True)
                raise StorageError(f"Failed to {operation}: {e}") from e

    def insert(self, item: HistoryItem) -> HistoryItem:
        """
        Persist a new item.

        Arguments:
            item (HistoryItem): The item to store.

        Returns:
            HistoryItem: The stored item.

        Raises:
            StorageError: If the database write fails.
        """

        def work(session: Session) -> HistoryItem:
            session.add(HistoryItemEntity.from_model(item))
            return item

        stored = self._run("insert history item", work, commit=True)
        self.__logger.debug("Inserted %s item %s.", item.kind_raw, item.id)
        return stored

    def latest(self) -> Optional[HistoryItem]:
        items = self.fetch_recent(1)
        return items[0] if items else None

    def get(self, item_id: str) -> Optional[HistoryItem]:
        def work(session: Session) -> Optional[HistoryItem]:
            entity = session.scalars(
                select(HistoryItemEntity).where(HistoryItemEntity.id == item_id)
            ).first()
            return entity.model if entity else None

        return self._run("get history item", work)

    def fetch_recent(self, limit: int) -> list[HistoryItem]:
        """At most limit items, newest first."""
        if limit <= 0:
            return []

        def work(session: Session) -> list[HistoryItem]:
            query = select(HistoryItemEntity).order_by(*_NEWEST_FIRST).limit(limit)
            return [entity.model for entity in session.scalars(query)]

        return self._run("fetch recent history", work)

    def fetch_all(self) -> list[HistoryItem]:
        def work(session: Session) -> list[HistoryItem]:
            query = select(HistoryItemEntity).order_by(*_NEWEST_FIRST)
            return [entity.model for entity in session.scalars(query)]

        return self._run("fetch history", work)

    def count(self) -> int:
        def work(session: Session) -> int:
            return session.scalar(select(func.count()).select_from(HistoryItemEntity)) or 0

        return self._run("count history", work)

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete items with a timestamp strictly before cutoff; returns the count."""
        boundary = to_storage_time(cutoff)

        def work(session: Session) -> int:
            result = session.execute(
                delete(HistoryItemEntity).where(HistoryItemEntity.timestamp < boundary)
            )
            return result.rowcount or 0

        deleted = self._run("prune history", work, commit=True)
        self.__logger.info("Pruned %s items older than %s.", deleted, cutoff.isoformat())
        return deleted

    def delete_all(self) -> int:
        def work(session: Session) -> int:
            return session.execute(delete(HistoryItemEntity)).rowcount or 0

        deleted = self._run("clear history", work, commit=True)
        self.__logger.info("Cleared %s history items.", deleted)
        return deleted

    def delete_by_id(self, item_id: str) -> bool:
        """Delete one item; returns False when it was not present."""

        def work(session: Session) -> bool:
            result = session.execute(
                delete(HistoryItemEntity).where(HistoryItemEntity.id == item_id)
            )
            return bool(result.rowcount)

        deleted = self._run("delete history item", work, commit=True)
        if deleted:
            self.__logger.info("Deleted history item %s.", item_id)
        else:
            self.__logger.debug("History item %s not found; nothing deleted.", item_id)
        return deleted


# endregion
