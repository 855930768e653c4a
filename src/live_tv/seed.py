"""Seed document loading and built-in default channels."""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import requests

from .config import config

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = [
    {
        'id': 1,
        'name': "Lofi Girl",
        'url': "https://www.youtube.com/embed/jfKfPfyJRdk",
        'type': "youtube",
        'category': "music",
        'description': "24/7 lofi hip hop radio - beats to relax/study to",
        'status': "active",
    },
    {
        'id': 2,
        'name': "NASA Live",
        'url': "https://www.youtube.com/embed/21X5lGlDOfg",
        'type': "youtube",
        'category': "education",
        'description': "NASA's official live stream from the International Space Station",
        'status': "active",
    },
    {
        'id': 3,
        'name': "BBC World News",
        'url': "https://www.youtube.com/embed/HN_2I4W2g14",
        'type': "youtube",
        'category': "news",
        'description': "24/7 international news coverage",
        'status': "active",
    },
    {
        'id': 4,
        'name': "Relaxing Nature",
        'url': "https://www.youtube.com/embed/4KZ_1d5Sghc",
        'type': "youtube",
        'category': "entertainment",
        'description': "Beautiful nature scenes with relaxing music",
        'status': "active",
    },
]


def default_channels() -> List[dict]:
    """Fresh copies of the built-in channel records."""
    return [dict(c) for c in DEFAULT_CHANNELS]


class SeedLoader:
    """Fetches the seed document from a URL or a local file."""

    def __init__(self, url: Optional[str] = None, path: Optional[Path] = None,
                 timeout: Optional[float] = None):
        self.url = config.SEED_URL if url is None else url
        self.path = config.SEED_FILE if path is None else path
        self.timeout = config.SEED_TIMEOUT if timeout is None else timeout

    def fetch(self) -> Optional[List[Any]]:
        """Return the seed records, or None when no seed is available."""
        if self.url:
            return self._fetch_url()
        if self.path:
            return self._read_file()
        return None

    def _fetch_url(self) -> Optional[List[Any]]:
        logger.info(f"Fetching seed channels from {self.url}")
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Seed fetch failed: {e}")
            return None
        return self._as_list(data)

    def _read_file(self) -> Optional[List[Any]]:
        path = Path(self.path)
        if not path.exists():
            logger.info(f"No seed file at {path}")
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read seed file {path}: {e}")
            return None
        return self._as_list(data)

    @staticmethod
    def _as_list(data) -> Optional[List[Any]]:
        if not isinstance(data, list):
            logger.warning("Seed document is not a JSON array")
            return None
        return data
