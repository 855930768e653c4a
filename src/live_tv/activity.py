"""Append-only activity log and backup history."""

import json
import logging
from typing import Callable, List, Optional

from .config import config
from .models import ActivityRecord, BackupRecord, utc_timestamp
from .storage import ACTIVITY_KEY, BACKUP_HISTORY_KEY

logger = logging.getLogger(__name__)


class _BoundedLog:
    """A JSON array in storage trimmed to its most recent ``limit`` entries."""

    key = ""

    def __init__(self, storage, limit: int, clock: Optional[Callable[[], str]] = None):
        self.storage = storage
        self.limit = limit
        self.clock = clock or utc_timestamp

    def _read(self) -> List[dict]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring corrupt '{self.key}' log: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring '{self.key}' log: expected a list")
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    def _push(self, entry: dict, fresh: bool = False) -> str:
        entries = [] if fresh else self._read()
        entries.append(entry)
        if len(entries) > self.limit:
            del entries[:len(entries) - self.limit]
        return json.dumps(entries)


class ActivityLog(_BoundedLog):
    """Operator actions shown on the dashboard, capped at the last 50."""

    key = ACTIVITY_KEY

    def __init__(self, storage, limit: Optional[int] = None, clock=None):
        super().__init__(storage, limit or config.ACTIVITY_LIMIT, clock)

    def prepare(self, title: str, description: str, icon: str = 'bell',
                fresh: bool = False) -> str:
        """Return the serialized log with a new entry, without writing it.

        With ``fresh`` the entry starts a new log instead of extending the stored one.
        """
        record = ActivityRecord(title=title, description=description, icon=icon,
                                timestamp=self.clock())
        return self._push(record.to_dict(), fresh=fresh)

    def append(self, title: str, description: str, icon: str = 'bell'):
        self.storage.set_item(self.key, self.prepare(title, description, icon))
        logger.info(f"Activity: {title} - {description}")

    def entries(self) -> List[ActivityRecord]:
        """All retained entries, oldest first."""
        return [ActivityRecord.from_dict(e) for e in self._read()]

    def recent(self, limit: Optional[int] = None) -> List[ActivityRecord]:
        """The latest entries, newest first."""
        limit = limit if limit is not None else config.RECENT_ACTIVITY_LIMIT
        if limit <= 0:
            return []
        return list(reversed(self.entries()[-limit:]))


class BackupHistory(_BoundedLog):
    """Import and export events, capped at the last 10."""

    key = BACKUP_HISTORY_KEY

    def __init__(self, storage, limit: Optional[int] = None, clock=None):
        super().__init__(storage, limit or config.BACKUP_HISTORY_LIMIT, clock)

    def prepare(self, kind: str, count: int) -> str:
        if kind not in ('import', 'export'):
            raise ValueError(f"Unknown backup record type: {kind}")
        record = BackupRecord(type=kind, channel_count=count, timestamp=self.clock())
        return self._push(record.to_dict())

    def append(self, kind: str, count: int):
        self.storage.set_item(self.key, self.prepare(kind, count))

    def records(self) -> List[BackupRecord]:
        """Retained records, newest first."""
        return [BackupRecord.from_dict(e) for e in reversed(self._read())]
