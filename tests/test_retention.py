from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cliphistory.config import DEFAULT_RETENTION_DAYS, RetentionConfig
from cliphistory.models import ContentKind, HistoryItem
from cliphistory.retention import cutoff, prune

NOW = datetime(2024, 6, 15, 9, 30, tzinfo=timezone.utc)


def new_york():
    try:
        return ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")


def test_cutoff_zero_disables_pruning():
    assert cutoff(0, NOW) is None


@pytest.mark.parametrize("days", [1, 7, 30, 90])
def test_cutoff_subtracts_days(days):
    assert cutoff(days, NOW) == NOW - timedelta(days=days)


def test_cutoff_rejects_negative_days():
    with pytest.raises(ValueError):
        cutoff(-1, NOW)


def test_cutoff_uses_calendar_days_across_dst():
    tz = new_york()
    # Clocks sprang forward on 2024-03-10.
    now = datetime(2024, 3, 12, 12, 0, tzinfo=tz)
    boundary = cutoff(3, now)
    assert (boundary.year, boundary.month, boundary.day, boundary.hour) == (2024, 3, 9, 12)
    elapsed = now.astimezone(timezone.utc) - boundary.astimezone(timezone.utc)
    assert elapsed == timedelta(days=3) - timedelta(hours=1)


def test_retention_config_states():
    unconfigured = RetentionConfig()
    assert not unconfigured.is_configured
    assert unconfigured.effective_days == DEFAULT_RETENTION_DAYS
    assert not unconfigured.retains_forever

    forever = RetentionConfig(retention_days=0)
    assert forever.is_configured
    assert forever.retains_forever

    with pytest.raises(ValidationError):
        RetentionConfig(retention_days=-5)


def test_prune_deletes_only_strictly_older_items(store):
    window = 30
    boundary = NOW - timedelta(days=window)
    stale = store.insert(HistoryItem.create(ContentKind.TEXT, "stale", boundary - timedelta(seconds=1)))
    edge = store.insert(HistoryItem.create(ContentKind.TEXT, "edge", boundary))
    fresh = store.insert(HistoryItem.create(ContentKind.TEXT, "fresh", NOW))

    config = RetentionConfig(retention_days=window)
    assert prune(store, config, NOW) == 1
    assert store.get(stale.id) is None
    assert store.fetch_all() == [fresh, edge]
    assert prune(store, config, NOW) == 0


def test_prune_forever_keeps_everything(store, logger):
    store.insert(HistoryItem.create(ContentKind.TEXT, "ancient", NOW - timedelta(days=3650)))
    assert prune(store, RetentionConfig(retention_days=0), NOW, logger) == 0
    assert store.count() == 1


def test_prune_unconfigured_uses_default_window(store):
    store.insert(HistoryItem.create(ContentKind.TEXT, "old", NOW - timedelta(days=DEFAULT_RETENTION_DAYS + 1)))
    store.insert(HistoryItem.create(ContentKind.TEXT, "recent", NOW - timedelta(days=DEFAULT_RETENTION_DAYS - 1)))
    assert prune(store, RetentionConfig(), NOW) == 1
    assert [item.content for item in store.fetch_all()] == ["recent"]
