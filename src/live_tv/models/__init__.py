"""Data models for Live TV."""

from .base import Base, get_session, init_db
from .storage_item import StorageItem
from .channel import Channel, ChannelType, ChannelStatus, utc_timestamp
from .activity import ActivityRecord, BackupRecord

__all__ = [
    "Base", "get_session", "init_db", "StorageItem",
    "Channel", "ChannelType", "ChannelStatus", "utc_timestamp",
    "ActivityRecord", "BackupRecord",
]
