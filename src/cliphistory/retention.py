"""
cliphistory.retention
Age-based pruning of the history.

cutoff() is pure: it only computes the boundary. prune() applies it to a store.
Pruning runs at startup and on explicit request, never per poll tick.
"""

from datetime import datetime, timedelta
from logging import Logger as T_Logger
from typing import Optional

from cliphistory.config import RetentionConfig
from cliphistory.store import HistoryStore


def cutoff(retention_days: int, now: datetime) -> Optional[datetime]:
    """
    Compute the prune boundary for a retention window.

    Arguments:
        retention_days (int): Window in days; 0 disables pruning.
        now (datetime): Reference time. Subtraction happens on the wall clock of
            now's own zone, so with a zoneinfo zone "7 days ago" keeps the same
            local time across a DST change.

    Returns:
        Optional[datetime]: Items strictly older than this are pruned; None when
            pruning is disabled.

    Raises:
        ValueError: If retention_days is negative.

    Example:
        >>> cutoff(0, datetime(2024, 3, 31, 12)) is None
        True
        >>> cutoff(30, datetime(2024, 3, 31, 12))
        datetime.datetime(2024, 3, 1, 12, 0)
    """
    if retention_days < 0:
        raise ValueError(f"retention_days must be >= 0, got {retention_days}")
    if retention_days == 0:
        return None
    return now - timedelta(days=retention_days)


def prune(
    store: HistoryStore,
    config: RetentionConfig,
    now: datetime,
    logger: Optional[T_Logger] = None,
) -> int:
    """Delete items older than the configured window; returns the deleted count."""
    boundary = cutoff(config.effective_days, now)
    if boundary is None:
        if logger:
            logger.info("Retention is set to forever; nothing pruned.")
        return 0
    return store.delete_older_than(boundary)
