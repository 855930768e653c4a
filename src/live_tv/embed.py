"""URL normalization for embedded YouTube and Facebook players."""

import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

logger = logging.getLogger(__name__)

YOUTUBE_PATTERNS = [
    re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+"),
    re.compile(r"^https?://www\.youtube\.com/embed/[^/]+"),
    re.compile(r"^https?://youtu\.be/[^/]+"),
]

FACEBOOK_PATTERNS = [
    re.compile(r"^(https?://)?(www\.)?facebook\.com/.+"),
    re.compile(r"^https?://www\.facebook\.com/plugins/video\.php\?.+"),
]

# Tried in order, first match wins
YOUTUBE_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\n?#]+)"),
    re.compile(r"(?:youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"(?:youtube\.com/v/)([^&\n?#]+)"),
]

YOUTUBE_EMBED_TEMPLATE = "https://www.youtube.com/embed/{video_id}?autoplay=1&rel=0"
FACEBOOK_EMBED_TEMPLATE = (
    "https://www.facebook.com/plugins/video.php?href={href}&show_text=0&autoplay=1"
)

VALIDITY_PATTERNS = {
    "youtube": YOUTUBE_PATTERNS,
    "facebook": FACEBOOK_PATTERNS,
}


@dataclass(frozen=True)
class Classification:
    """Validity verdict for a channel URL."""

    valid: bool


def _type_name(channel_type) -> str:
    # Accepts ChannelType members as well as raw strings
    return getattr(channel_type, "value", channel_type) or ""


def _encode_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="-_.!~*'()")


def classify(url, channel_type) -> Classification:
    """Check whether ``url`` is a usable source URL for ``channel_type``."""
    if not isinstance(url, str) or not url:
        return Classification(valid=False)
    patterns = VALIDITY_PATTERNS.get(_type_name(channel_type), [])
    return Classification(valid=any(p.match(url) for p in patterns))


def to_embed_url(url, channel_type) -> str:
    """Rewrite a channel URL into a URL an inline player can load.

    Unknown shapes are passed through unchanged; the player surface reports
    unusable URLs itself.
    """
    if not isinstance(url, str):
        return url
    if "/embed/" in url:
        return url

    kind = _type_name(channel_type)
    if kind == "youtube":
        for pattern in YOUTUBE_ID_PATTERNS:
            match = pattern.search(url)
            if match and match.group(1):
                return YOUTUBE_EMBED_TEMPLATE.format(video_id=match.group(1))
    elif kind == "facebook":
        if "facebook.com" in url and "/videos/" in url:
            return FACEBOOK_EMBED_TEMPLATE.format(href=_encode_component(url))

    logger.debug(f"No embed pattern matched for {kind} url: {url}")
    return url


def share_url(base_url: str, channel_id) -> str:
    """Build the deep link that auto-selects a channel on load."""
    return f"{base_url}?channel={channel_id}"


def social_share_links(link: str, channel_name: str) -> dict:
    """WhatsApp and Facebook share links for a channel deep link."""
    text = _encode_component(f"Watch {channel_name} on Live TV Stream")
    encoded = _encode_component(link)
    return {
        'whatsapp': f"https://wa.me/?text={text}%20{encoded}",
        'facebook': f"https://www.facebook.com/sharer/sharer.php?u={encoded}&quote={text}",
    }
