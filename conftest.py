import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add src to path for imports
SRC_DIR = Path(__file__).resolve().parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from live_tv.errors import PersistenceError
from live_tv.models import init_db, utc_timestamp
from live_tv.seed import SeedLoader
from live_tv.storage import KeyValueStorage
from live_tv.store import ChannelStore


class FakeClock:
    """Returns ISO instants one second apart, starting 2024-05-01 12:00 UTC."""

    def __init__(self, start=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now += timedelta(seconds=1)
        return utc_timestamp(self.now)


class FlakyStorage(KeyValueStorage):
    """Storage whose reads or writes can be switched to fail."""

    fail_reads = False
    fail_writes = False

    def get_item(self, key):
        if self.fail_reads:
            raise PersistenceError(f"Could not read '{key}' from storage")
        return super().get_item(key)

    def set_items(self, items):
        if self.fail_writes:
            raise PersistenceError("Quota exceeded")
        super().set_items(items)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def storage(engine):
    return FlakyStorage(sessionmaker(bind=engine, autoflush=False))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def no_seed(tmp_path):
    return SeedLoader(url="", path=tmp_path / "missing.json")


@pytest.fixture()
def store(storage, clock, no_seed):
    """A store loaded with the four built-in default channels."""
    s = ChannelStore(storage, seed_loader=no_seed, clock=clock, strict_import=False)
    s.load()
    return s


@pytest.fixture()
def youtube_fields():
    return {
        'name': "Sky News",
        'url': "https://www.youtube.com/watch?v=9Auq9mYxFEE",
        'type': "youtube",
        'category': "news",
        'description': "Rolling news",
    }
