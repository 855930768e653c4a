"""Tests for the bounded activity log and backup history."""

import pytest

from live_tv.activity import ActivityLog, BackupHistory
from live_tv.storage import ACTIVITY_KEY, BACKUP_HISTORY_KEY


def test_activity_log_keeps_last_fifty(storage, clock):
    log = ActivityLog(storage, limit=50, clock=clock)
    for i in range(60):
        log.append(f"Event {i}", "something happened")

    entries = log.entries()
    assert len(entries) == 50
    assert entries[0].title == "Event 10"
    assert entries[-1].title == "Event 59"


def test_recent_is_newest_first_and_capped(storage, clock):
    log = ActivityLog(storage, clock=clock)
    for i in range(8):
        log.append(f"Event {i}", "", icon="edit")

    assert [a.title for a in log.recent(5)] == [f"Event {i}" for i in (7, 6, 5, 4, 3)]
    assert log.recent(0) == []
    assert log.recent(5)[0].icon == "edit"


def test_default_icon(storage, clock):
    log = ActivityLog(storage, clock=clock)
    log.append("Hello", "world")
    assert log.entries()[0].icon == "bell"
    assert log.entries()[0].timestamp == "2024-05-01T12:00:01.000Z"


def test_prepare_does_not_write(storage, clock):
    log = ActivityLog(storage, clock=clock)
    log.prepare("Pending", "not yet")
    assert storage.get_item(ACTIVITY_KEY) is None


def test_corrupt_log_reads_as_empty(storage, clock):
    storage.set_item(ACTIVITY_KEY, "[broken")
    log = ActivityLog(storage, clock=clock)
    assert log.entries() == []
    log.append("Recovered", "")
    assert [a.title for a in log.entries()] == ["Recovered"]


def test_backup_history_keeps_last_ten_newest_first(storage, clock):
    history = BackupHistory(storage, limit=10, clock=clock)
    for count in range(12):
        history.append("import" if count % 2 else "export", count)

    records = history.records()
    assert len(records) == 10
    assert records[0].channel_count == 11
    assert records[-1].channel_count == 2
    assert records[0].type == "import"


def test_backup_history_stores_channel_count_key(storage, clock):
    BackupHistory(storage, clock=clock).append("export", 3)
    assert '"channels": 3' in storage.get_item(BACKUP_HISTORY_KEY)


def test_backup_history_rejects_unknown_kind(storage, clock):
    with pytest.raises(ValueError):
        BackupHistory(storage, clock=clock).append("sync", 1)
