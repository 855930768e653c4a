"""Channel store: the single owner of the channel collection."""

import json
import logging
import threading
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from .activity import ActivityLog, BackupHistory
from .config import config
from .embed import classify
from .errors import FormatError, NotFoundError, PersistenceError, ValidationError
from .models import Channel, ChannelType, utc_timestamp
from .models.channel import REQUIRED_FIELDS
from .query import ALL, filter_channels
from .seed import SeedLoader, default_channels
from .storage import (
    ACTIVITY_KEY,
    BACKUP_HISTORY_KEY,
    BACKUP_SNAPSHOT_KEY,
    CHANNELS_KEY,
)
from .transfer import ImportResult, export_channels, export_filename, parse_import

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "url", "type", "category", "description", "status")
BACKUP_VERSION = "1.0"

SOURCE_STORAGE = "storage"
SOURCE_SEED = "seed"
SOURCE_DEFAULTS = "defaults"


class ChannelStore:
    """Ordered channel collection persisted to a key-value backend.

    Mutations serialize the new state and write it, together with the
    activity entry describing it, in one backend transaction. The in-memory
    list only changes once that write succeeds.
    """

    def __init__(self, storage, activity: Optional[ActivityLog] = None,
                 backups: Optional[BackupHistory] = None,
                 seed_loader: Optional[SeedLoader] = None,
                 clock: Optional[Callable[[], str]] = None,
                 strict_import: Optional[bool] = None):
        self.storage = storage
        self.clock = clock or utc_timestamp
        self.activity = activity or ActivityLog(storage, clock=self.clock)
        self.backups = backups or BackupHistory(storage, clock=self.clock)
        self.seed_loader = seed_loader or SeedLoader()
        self.strict_import = config.STRICT_IMPORT if strict_import is None else strict_import

        self._channels: List[Channel] = []
        self._last_id = 0
        self._lock = threading.RLock()
        self._listeners: List[Callable[[str, Optional[Channel]], None]] = []

        self.load_source: Optional[str] = None
        self.load_warning: Optional[str] = None

    # Loading

    def load(self) -> List[Channel]:
        """Load channels from storage, falling back to the seed, then defaults."""
        with self._lock:
            self.load_warning = None
            channels = self._read_stored()
            source = SOURCE_STORAGE
            if channels is None:
                channels, source = self._read_seed()

            repaired = self._assign_missing(channels)
            if source != SOURCE_STORAGE or repaired:
                try:
                    self.storage.set_item(CHANNELS_KEY, self._serialize(channels))
                except PersistenceError as e:
                    self._warn(f"Loaded channels could not be saved: {e}")

            self._channels = channels
            self.load_source = source
            logger.info(f"Loaded {len(channels)} channels from {source}")
            self._notify('load', None)
            return self.list()

    def refresh(self) -> List[Channel]:
        """Re-read the collection from storage."""
        return self.load()

    def _warn(self, message: str):
        logger.warning(message)
        self.load_warning = message

    def _read_stored(self) -> Optional[List[Channel]]:
        try:
            raw = self.storage.get_item(CHANNELS_KEY)
        except PersistenceError as e:
            self._warn(f"Error loading channels: {e}")
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except ValueError as e:
            self._warn(f"Stored channels are corrupt: {e}")
            return None
        if not isinstance(data, list):
            self._warn("Stored channels are not a list")
            return None

        channels = []
        for record in data:
            try:
                channels.append(Channel.from_dict(record))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping unreadable stored channel: {e}")
        if data and not channels:
            self._warn("No stored channel could be read")
            return None
        return channels

    def _read_seed(self) -> Tuple[List[Channel], str]:
        records = self.seed_loader.fetch()
        if records is not None:
            try:
                return parse_import(records).accepted, SOURCE_SEED
            except FormatError as e:
                logger.warning(f"Seed document unusable: {e}")
        logger.info("Using built-in default channels")
        return [Channel.from_dict(r) for r in default_channels()], SOURCE_DEFAULTS

    def _assign_missing(self, channels: List[Channel]) -> bool:
        """Give records without a unique id a new one and fill missing timestamps."""
        known = [c.id for c in channels if c.id is not None]
        self._last_id = max([self._last_id] + known)

        repaired = False
        seen = set()
        now = self.clock()
        for channel in channels:
            if channel.id is None or channel.id in seen:
                channel.id = self._next_id()
                repaired = True
            seen.add(channel.id)
            if not channel.created_at:
                channel.created_at = now
                repaired = True
            if not channel.updated_at:
                channel.updated_at = channel.created_at
                repaired = True
        return repaired

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    # Reading

    def list(self) -> List[Channel]:
        """Snapshot of all channels in insertion order."""
        with self._lock:
            return [replace(c) for c in self._channels]

    def __len__(self):
        return len(self._channels)

    def get(self, channel_id) -> Channel:
        with self._lock:
            return replace(self._channels[self._index(channel_id)])

    def find(self, channel_id) -> Optional[Channel]:
        """Look up a channel by id, returning None for unknown or malformed ids."""
        try:
            return self.get(channel_id)
        except NotFoundError:
            return None

    def _index(self, channel_id) -> int:
        try:
            wanted = int(channel_id)
        except (TypeError, ValueError):
            raise NotFoundError(channel_id)
        for i, channel in enumerate(self._channels):
            if channel.id == wanted:
                return i
        raise NotFoundError(channel_id)

    def filter(self, search_term: str = "", category: str = ALL, type: str = ALL) -> List[Channel]:
        return filter_channels(self.list(), search_term, category, type)

    def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        with self._lock:
            return list(dict.fromkeys(c.category for c in self._channels))

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'total': len(self._channels),
                'youtube': sum(1 for c in self._channels if c.type == ChannelType.YOUTUBE),
                'facebook': sum(1 for c in self._channels if c.type == ChannelType.FACEBOOK),
                'categories': len(set(c.category for c in self._channels)),
            }

    # Mutations

    def add(self, fields: dict) -> Channel:
        """Validate and append a new channel."""
        with self._lock:
            channel = self._build(fields)
            channel.id = self._next_id()
            channel.created_at = channel.updated_at = self.clock()

            self._commit(
                self._channels + [channel],
                ('Channel Added', f"Added new channel: {channel.name}", 'plus-circle'),
            )
            logger.info(f"Added channel {channel.id}: {channel.name}")
            self._notify('added', channel)
            return replace(channel)

    def update(self, channel_id, fields: dict) -> Channel:
        """Merge ``fields`` into an existing channel, keeping its id and creation time."""
        with self._lock:
            index = self._index(channel_id)
            current = self._channels[index]
            channel = self._build(fields, base=current)

            now = self.clock()
            if current.updated_at and now < current.updated_at:
                now = current.updated_at
            channel.updated_at = now

            channels = list(self._channels)
            channels[index] = channel
            self._commit(
                channels,
                ('Channel Updated', f"Updated channel: {channel.name}", 'edit'),
            )
            logger.info(f"Updated channel {channel.id}: {channel.name}")
            self._notify('updated', channel)
            return replace(channel)

    def remove(self, channel_id) -> Channel:
        with self._lock:
            index = self._index(channel_id)
            channel = self._channels[index]
            channels = self._channels[:index] + self._channels[index + 1:]
            self._commit(
                channels,
                ('Channel Deleted', f"Deleted channel: {channel.name}", 'trash'),
            )
            logger.info(f"Deleted channel {channel.id}: {channel.name}")
            self._notify('deleted', channel)
            return replace(channel)

    def clear(self):
        """Erase all channels and both logs; the clear itself starts the new log."""
        with self._lock:
            self.storage.set_items({
                CHANNELS_KEY: self._serialize([]),
                BACKUP_HISTORY_KEY: None,
                ACTIVITY_KEY: self.activity.prepare(
                    'Data Cleared', 'All data was cleared from storage', 'trash', fresh=True),
            })
            self._channels = []
            logger.warning("All channel data cleared")
            self._notify('cleared', None)

    def replace_all(self, channels: List[Channel], activity=None,
                    extra: Optional[dict] = None, action: str = 'replaced') -> List[Channel]:
        """Replace the whole collection, e.g. from an import."""
        with self._lock:
            channels = [replace(c) for c in channels]
            self._assign_missing(channels)
            self._commit(channels, activity, extra)
            self._notify(action, None)
            return self.list()

    def _build(self, fields, base: Optional[Channel] = None) -> Channel:
        if not isinstance(fields, dict):
            raise ValidationError("Channel data must be an object")

        data = base.to_dict() if base else {}
        data.update({k: v for k, v in fields.items() if k in EDITABLE_FIELDS})

        missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or '').strip()]
        if missing:
            raise ValidationError(f"Missing required field: {', '.join(missing)}")
        try:
            channel = Channel.from_dict(data)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Invalid channel data: {e}") from e

        if not classify(channel.url, channel.type).valid:
            raise ValidationError(f"Please enter a valid {channel.type.value.title()} URL")
        return channel

    def _commit(self, channels: List[Channel], activity, extra: Optional[dict] = None):
        """Persist ``channels`` (plus log entries) and only then make them current."""
        items = {CHANNELS_KEY: self._serialize(channels)}
        if activity:
            items[ACTIVITY_KEY] = self.activity.prepare(*activity)
        if extra:
            items.update(extra)
        self.storage.set_items(items)
        self._channels = channels

    @staticmethod
    def _serialize(channels: List[Channel]) -> str:
        return json.dumps([c.to_dict() for c in channels])

    # Import, export and backup

    def import_channels(self, document, confirm: Optional[Callable[[int], bool]] = None) -> Optional[ImportResult]:
        """Replace the collection with the valid records of an import document.

        ``confirm`` receives the accepted count; a falsey answer cancels the
        import and returns None.
        """
        result = parse_import(document, strict=self.strict_import)
        count = len(result.accepted)
        if confirm is not None and not confirm(count):
            logger.info(f"Import of {count} channels cancelled")
            return None

        with self._lock:
            channels = self.replace_all(
                result.accepted,
                activity=('Data Imported', f"Imported {count} channels from file", 'upload'),
                extra={BACKUP_HISTORY_KEY: self.backups.prepare('import', count)},
                action='imported',
            )
            logger.info(f"Imported {count} channels ({result.rejected_count} rejected)")
            return ImportResult(accepted=channels, rejected_count=result.rejected_count)

    def export_document(self) -> Tuple[str, str]:
        """Return ``(filename, json_document)`` for a download of all channels."""
        with self._lock:
            document = export_channels(self._channels)
            filename = export_filename(date.fromisoformat(self.clock()[:10]))
            self.storage.set_items({
                ACTIVITY_KEY: self.activity.prepare(
                    'Data Exported', 'All channels exported to JSON file', 'download'),
                BACKUP_HISTORY_KEY: self.backups.prepare('export', len(self._channels)),
            })
            logger.info(f"Exported {len(self._channels)} channels to {filename}")
            return filename, document

    def backup(self) -> dict:
        """Write a local snapshot of all channels under ``channelBackup``."""
        with self._lock:
            snapshot = {
                'channels': [c.to_dict() for c in self._channels],
                'timestamp': self.clock(),
                'version': BACKUP_VERSION,
            }
            self.storage.set_items({
                BACKUP_SNAPSHOT_KEY: json.dumps(snapshot),
                ACTIVITY_KEY: self.activity.prepare(
                    'Data Backed Up', 'Local backup created successfully', 'save'),
            })
            logger.info(f"Backed up {len(self._channels)} channels")
            return snapshot

    # Listeners

    def subscribe(self, callback: Callable[[str, Optional[Channel]], None]):
        """Call ``callback(action, channel)`` after every committed change."""
        self._listeners.append(callback)

    def _notify(self, action: str, channel: Optional[Channel]):
        for callback in list(self._listeners):
            try:
                callback(action, replace(channel) if channel else None)
            except Exception:
                logger.exception(f"Channel listener failed on '{action}'")
