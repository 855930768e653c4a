"""Import and export of channel lists as JSON documents."""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from .embed import classify
from .errors import FormatError
from .models import Channel
from .models.channel import REQUIRED_FIELDS

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    accepted: List[Channel] = field(default_factory=list)
    rejected_count: int = 0


def export_channels(channels: Iterable[Channel]) -> str:
    """Serialize channels as a pretty-printed JSON array."""
    return json.dumps([c.to_dict() for c in channels], indent=2, ensure_ascii=False)


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"channels-backup-{today.isoformat()}.json"


def _accept(candidate, strict: bool) -> Optional[Channel]:
    """Return the channel for an importable candidate, or None."""
    if not isinstance(candidate, dict):
        return None
    if not all(str(candidate.get(f) or '').strip() for f in REQUIRED_FIELDS):
        return None
    try:
        channel = Channel.from_dict(candidate)
    except (ValueError, TypeError) as e:
        logger.debug(f"Rejected import candidate {candidate.get('name')!r}: {e}")
        return None
    if strict and not classify(channel.url, channel.type).valid:
        logger.debug(f"Rejected import candidate {channel.name!r}: invalid url")
        return None
    return channel


def parse_import(document, strict: bool = False) -> ImportResult:
    """Parse an import document and keep the usable channel records.

    ``document`` may be raw JSON text/bytes or an already decoded list.
    Raises ``FormatError`` if it is not a JSON array or nothing is usable.
    """
    data = document
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FormatError(f"Invalid file encoding: {e}") from e
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise FormatError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise FormatError("Invalid file format")

    result = ImportResult()
    for candidate in data:
        channel = _accept(candidate, strict)
        if channel is None:
            result.rejected_count += 1
        else:
            result.accepted.append(channel)

    if not result.accepted:
        raise FormatError("No valid channels found in file")

    logger.info(f"Parsed import: {len(result.accepted)} accepted, {result.rejected_count} rejected")
    return result
