import threading
import time

import pytest

from cliphistory.exceptions import ClipboardError, StorageError
from cliphistory.models import ContentKind, NotificationKind
from cliphistory.monitor import MonitorLoop, MonitorState
from cliphistory.notifications import NotificationChannel


@pytest.fixture
def monitor(clipboard, store, watcher_settings, logger, clock) -> MonitorLoop:
    return MonitorLoop(clipboard, store, watcher_settings, logger, clock=clock)


def contents(store):
    return [item.content for item in store.fetch_all()]


def test_unchanged_counter_does_no_work(monitor, clipboard, store):
    assert monitor.tick() is None
    assert store.count() == 0
    assert monitor.state is MonitorState.IDLE


def test_content_present_at_startup_is_not_recorded(clipboard, store, watcher_settings, logger):
    clipboard.copy_text("before start")
    loop = MonitorLoop(clipboard, store, watcher_settings, logger)
    assert loop.tick() is None
    assert store.count() == 0


def test_records_text_change(monitor, clipboard, store, clock):
    clipboard.copy_text("hello")
    item = monitor.tick()
    assert item is not None
    assert item.kind is ContentKind.TEXT
    assert item.timestamp == clock.now
    assert store.fetch_all() == [item]
    assert monitor.state is MonitorState.IDLE


def test_repeated_identical_copies_store_one_item(monitor, clipboard, store):
    for _ in range(5):
        clipboard.copy_text("same")
        monitor.tick()
    clipboard.reaffirm()
    assert monitor.tick() is None
    assert contents(store) == ["same"]


def test_only_the_previous_item_is_checked_for_duplicates(monitor, clipboard, store, clock):
    for text in ["A", "B", "A"]:
        clipboard.copy_text(text)
        clock.advance(seconds=1)
        monitor.tick()
    assert contents(store) == ["A", "B", "A"]


def test_duplicate_check_ignores_kind(monitor, clipboard, store):
    clipboard.copy_text("/tmp/a.txt")
    monitor.tick()
    clipboard.copy_files(["/tmp/a.txt"])
    assert monitor.tick() is None
    assert store.count() == 1


def test_latest_distinct_write_is_most_recent_item(monitor, clipboard, store, clock):
    for text in ["one", "two", "two", "three", "one"]:
        clipboard.copy_text(text)
        clock.advance(seconds=1)
        monitor.tick()
    assert store.latest().content == "one"
    assert contents(store) == ["one", "three", "two", "one"]


def test_file_reference_classified_before_text(monitor, clipboard):
    clipboard.copy_files(["/tmp/a.txt", "/tmp/b.txt"], text="/tmp/a.txt\n/tmp/b.txt")
    item = monitor.tick()
    assert item.kind is ContentKind.FILE_PATH
    assert item.content == "/tmp/a.txt"


def test_unreadable_content_is_recorded_with_sentinel(monitor, clipboard, watcher_settings):
    clipboard.copy_unreadable()
    item = monitor.tick()
    assert item.kind is ContentKind.UNSUPPORTED
    assert item.content == watcher_settings.unsupported_content


def test_storage_error_skips_tick_and_polling_continues(monitor, clipboard, store, monkeypatch):
    original_insert = store.insert
    calls = {"n": 0}

    def flaky_insert(item):
        calls["n"] += 1
        if calls["n"] == 1:
            raise StorageError("disk full")
        return original_insert(item)

    monkeypatch.setattr(store, "insert", flaky_insert)
    clipboard.copy_text("lost")
    assert monitor.tick() is None
    # The failed write is not retried on the next tick.
    assert monitor.tick() is None
    clipboard.copy_text("kept")
    assert monitor.tick().content == "kept"
    assert contents(store) == ["kept"]


def test_storage_error_is_published_to_channel(clipboard, store, watcher_settings, logger, monkeypatch):
    channel = NotificationChannel()
    loop = MonitorLoop(clipboard, store, watcher_settings, logger, notifications=channel)

    def failing_insert(item):
        raise StorageError("disk full")

    monkeypatch.setattr(store, "insert", failing_insert)
    clipboard.copy_text("lost")
    assert loop.tick() is None
    notifications = channel.drain()
    assert [n.kind for n in notifications] == [NotificationKind.STORAGE_ERROR]
    assert "disk full" in notifications[0].message


def test_clipboard_read_error_is_contained(monitor, clipboard, monkeypatch):
    def broken():
        raise ClipboardError("backend gone")

    clipboard.copy_text("x")
    monkeypatch.setattr(clipboard, "read_typed", broken)
    assert monitor.tick() is None
    assert monitor.state is MonitorState.IDLE


def test_busy_store_skips_tick(monitor, clipboard, store):
    holding = threading.Event()
    release = threading.Event()

    def hold():
        with store.locked():
            holding.set()
            release.wait(2)

    worker = threading.Thread(target=hold)
    worker.start()
    try:
        assert holding.wait(2)
        clipboard.copy_text("while busy")
        assert monitor.tick() is None
    finally:
        release.set()
        worker.join(2)
    assert store.count() == 0


def test_on_insert_callback_receives_item(clipboard, store, watcher_settings, logger):
    seen = []
    loop = MonitorLoop(clipboard, store, watcher_settings, logger, on_insert=seen.append)
    clipboard.copy_text("hello")
    item = loop.tick()
    assert seen == [item]


def test_background_thread_records_changes(monitor, clipboard, store):
    monitor.start()
    try:
        assert monitor.is_running
        clipboard.copy_text("from another app")
        deadline = time.monotonic() + 2
        while store.count() == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        monitor.stop()
    assert contents(store) == ["from another app"]
    assert not monitor.is_running
    monitor.stop()


def test_paused_monitor_never_sees_intermediate_clear(monitor, clipboard, store):
    results = []
    with monitor.paused():
        clipboard.clear()
        worker = threading.Thread(target=lambda: results.append(monitor.tick()))
        worker.start()
        worker.join(timeout=0.1)
        assert worker.is_alive()
        clipboard.write_text("pasted back")
    worker.join(timeout=2)
    assert contents(store) == ["pasted back"]
    assert results[0].kind is ContentKind.TEXT
