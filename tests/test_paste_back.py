import subprocess
import sys

import pytest

from cliphistory.clipboard import ClipboardContent
from cliphistory.exceptions import OpenFailure
from cliphistory.models import ContentKind, HistoryItem, NotificationKind
from cliphistory.notifications import NotificationChannel
from cliphistory.paste_back import PasteBackService, SystemFileOpener


@pytest.fixture
def channel() -> NotificationChannel:
    return NotificationChannel()


@pytest.fixture
def paste_back(clipboard, opener, logger, channel) -> PasteBackService:
    return PasteBackService(clipboard, opener, logger, notifications=channel)


def test_text_item_is_written_verbatim(paste_back, clipboard, channel):
    clipboard.copy_files(["/tmp/other"])
    item = HistoryItem.create(ContentKind.TEXT, "  line one\nline two  ")
    assert paste_back.paste(item) is True
    assert clipboard.read_typed() == ClipboardContent(text="  line one\nline two  ")
    assert [n.kind for n in channel.drain()] == [NotificationKind.HIDE_REQUESTED]


def test_open_intent_is_ignored_for_text(paste_back, clipboard, opener):
    item = HistoryItem.create(ContentKind.TEXT, "hello")
    assert paste_back.paste(item, open_file=True) is True
    assert clipboard.read_typed().text == "hello"
    assert opener.opened == []


def test_file_reference_written_even_if_file_missing(paste_back, clipboard, tmp_path):
    missing = str(tmp_path / "gone.txt")
    item = HistoryItem.create(ContentKind.FILE_PATH, missing)
    assert paste_back.paste(item, open_file=False) is True
    assert clipboard.read_typed().file_paths == [missing]


def test_open_existing_file(paste_back, clipboard, opener, channel, tmp_path):
    target = tmp_path / "a.txt"
    target.write_text("data")
    count = clipboard.change_count()
    item = HistoryItem.create(ContentKind.FILE_PATH, str(target))
    assert paste_back.paste(item, open_file=True) is True
    assert opener.opened == [str(target)]
    assert clipboard.change_count() == count
    assert channel.get(timeout=0).kind is NotificationKind.HIDE_REQUESTED


def test_open_missing_file_fails_and_leaves_clipboard(paste_back, clipboard, channel, tmp_path):
    clipboard.copy_text("keep me")
    count = clipboard.change_count()
    item = HistoryItem.create(ContentKind.FILE_PATH, str(tmp_path / "missing.txt"))
    with pytest.raises(OpenFailure) as excinfo:
        paste_back.paste(item, open_file=True)
    assert excinfo.value.path == item.content
    assert clipboard.change_count() == count
    assert clipboard.read_typed().text == "keep me"
    assert channel.drain() == []


def test_unsupported_item_is_never_pasted(paste_back, clipboard, channel):
    clipboard.copy_text("current")
    count = clipboard.change_count()
    item = HistoryItem.create(ContentKind.UNSUPPORTED, "Unsupported content type.")
    assert paste_back.paste(item) is False
    assert paste_back.paste(item, open_file=True) is False
    assert clipboard.change_count() == count
    assert clipboard.read_typed().text == "current"
    assert channel.drain() == []


def test_system_opener_rejects_missing_file(tmp_path):
    with pytest.raises(OpenFailure, match="does not exist"):
        SystemFileOpener().open(str(tmp_path / "nope.txt"))


@pytest.mark.skipif(sys.platform == "win32", reason="uses a subprocess launcher")
def test_system_opener_invokes_platform_launcher(tmp_path, monkeypatch):
    target = tmp_path / "a.txt"
    target.write_text("data")
    calls = []

    def fake_run(args, **kwargs):
        calls.append(args)
        return subprocess.CompletedProcess(args, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    SystemFileOpener().open(str(target))
    assert calls[0][0] in ("open", "xdg-open")
    assert calls[0][1] == str(target)


@pytest.mark.skipif(sys.platform == "win32", reason="uses a subprocess launcher")
def test_system_opener_wraps_launcher_failure(tmp_path, monkeypatch):
    target = tmp_path / "a.txt"
    target.write_text("data")

    def failing_run(args, **kwargs):
        raise subprocess.CalledProcessError(4, args)

    monkeypatch.setattr(subprocess, "run", failing_run)
    with pytest.raises(OpenFailure):
        SystemFileOpener().open(str(target))
