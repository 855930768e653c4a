"""Channel record model."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

REQUIRED_FIELDS = ("name", "url", "type", "category")


class ChannelType(str, Enum):
    """Streaming platform a channel plays from."""

    YOUTUBE = "youtube"
    FACEBOOK = "facebook"


class ChannelStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _enum_text(value, default: str) -> str:
    value = getattr(value, "value", value) or default
    return str(value).strip().lower()


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as an ISO instant, e.g. ``2024-05-01T12:00:00.000Z``."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value) -> Optional[str]:
    """Normalize a stored timestamp to an ISO instant.

    Numbers are read as epoch milliseconds. Anything unreadable becomes None.
    """
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return utc_timestamp(datetime.fromtimestamp(value / 1000, timezone.utc))
        if isinstance(value, str) and value.strip():
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return utc_timestamp(datetime.fromisoformat(text))
    except (ValueError, OverflowError, OSError):
        return None
    return None


@dataclass
class Channel:
    """A named streaming source with a playable URL."""

    id: Optional[int]
    name: str
    url: str
    type: ChannelType
    category: str
    description: str = ""
    status: ChannelStatus = ChannelStatus.ACTIVE
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __repr__(self):
        return f"<Channel(id={self.id}, name='{self.name}', type={self.type.value})>"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the stable JSON field order used on disk and in exports."""
        return {
            'id': self.id,
            'name': self.name,
            'url': self.url,
            'type': self.type.value,
            'category': self.category,
            'description': self.description,
            'status': self.status.value,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Channel":
        """Build a channel from its JSON form.

        Raises ``ValueError`` or ``TypeError`` when a field cannot be converted.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Channel record must be an object, got {type(data).__name__}")

        raw_id = data.get('id')
        return cls(
            id=int(raw_id) if raw_id is not None else None,
            name=str(data.get('name') or '').strip(),
            url=str(data.get('url') or '').strip(),
            type=ChannelType(_enum_text(data.get('type'), '')),
            category=str(data.get('category') or '').strip(),
            description=str(data.get('description') or '').strip(),
            status=ChannelStatus(_enum_text(data.get('status'), 'active')),
            created_at=parse_timestamp(data.get('createdAt')),
            updated_at=parse_timestamp(data.get('updatedAt')),
        )
