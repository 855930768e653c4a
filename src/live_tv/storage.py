"""Synchronous key-value persistence backend."""

import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from .errors import PersistenceError
from .models import get_session, StorageItem

logger = logging.getLogger(__name__)

# Keys
CHANNELS_KEY = "channels"
ACTIVITY_KEY = "adminActivity"
BACKUP_HISTORY_KEY = "backupHistory"
BACKUP_SNAPSHOT_KEY = "channelBackup"


class KeyValueStorage:
    """String-keyed, string-valued store kept in the ``storage_items`` table.

    Every call runs in its own session; ``set_items`` writes several keys in a
    single transaction so a failure leaves none of them changed.
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or None."""
        try:
            with get_session(self._session_factory) as session:
                item = session.get(StorageItem, key)
                return item.value if item else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read '{key}': {e}")
            raise PersistenceError(f"Could not read '{key}' from storage") from e

    def set_item(self, key: str, value: str):
        self.set_items({key: value})

    def set_items(self, items: Dict[str, Optional[str]]):
        """Write or (for None values) delete several keys atomically."""
        try:
            with get_session(self._session_factory) as session:
                for key, value in items.items():
                    item = session.get(StorageItem, key)
                    if value is None:
                        if item is not None:
                            session.delete(item)
                    elif item is None:
                        session.add(StorageItem(key=key, value=value))
                    else:
                        item.value = value
        except SQLAlchemyError as e:
            logger.error(f"Failed to write {sorted(items)}: {e}")
            raise PersistenceError(f"Could not save {', '.join(sorted(items))} to storage") from e
