"""Filtering and search over channel lists."""

from typing import Iterable, List, Sequence

from .models import Channel

ALL = "all"

ADMIN_SEARCH_FIELDS = ("name", "description")
VIEWER_SEARCH_FIELDS = ("name", "description", "category")


def _facet_value(value) -> str:
    return getattr(value, "value", value)


def matches_term(channel: Channel, term: str, fields: Sequence[str]) -> bool:
    """True if ``term`` is empty or a substring of any of ``fields``, ignoring case."""
    term = (term or "").strip().lower()
    if not term:
        return True
    return any(term in (getattr(channel, f) or "").lower() for f in fields)


def matches_facet(value, wanted) -> bool:
    wanted = _facet_value(wanted)
    return not wanted or wanted == ALL or _facet_value(value) == wanted


def filter_channels(
    channels: Iterable[Channel],
    search_term: str = "",
    category: str = ALL,
    type: str = ALL,
) -> List[Channel]:
    """Admin table view: search on name/description AND category AND type."""
    return [
        c for c in channels
        if matches_term(c, search_term, ADMIN_SEARCH_FIELDS)
        and matches_facet(c.category, category)
        and matches_facet(c.type, type)
    ]


def filter_by_category(channels: Iterable[Channel], category: str = ALL) -> List[Channel]:
    """Viewer category dropdown."""
    return [c for c in channels if matches_facet(c.category, category)]


def search_channels(channels: Iterable[Channel], term: str) -> List[Channel]:
    """Viewer search box: also matches category, ignores facet filters."""
    return [c for c in channels if matches_term(c, term, VIEWER_SEARCH_FIELDS)]
