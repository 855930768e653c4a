"""Activity and backup history records."""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class ActivityRecord:
    """One operator action shown in the recent activity feed."""

    title: str
    description: str
    icon: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityRecord":
        return cls(
            title=data.get('title', ''),
            description=data.get('description', ''),
            icon=data.get('icon') or 'bell',
            timestamp=data.get('timestamp', ''),
        )


@dataclass
class BackupRecord:
    """An import or export event with the number of channels moved."""

    type: str
    channel_count: int
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        # Stored under "channels" to stay compatible with existing backup history
        return {
            'type': self.type,
            'channels': self.channel_count,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackupRecord":
        return cls(
            type=data.get('type', 'import'),
            channel_count=int(data.get('channels', data.get('channelCount', 0)) or 0),
            timestamp=data.get('timestamp', ''),
        )
