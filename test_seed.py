"""Tests for seed document loading."""

import json

import requests

from live_tv.seed import SeedLoader, default_channels


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_fetch_from_url(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse([{'name': "Remote"}])

    monkeypatch.setattr(requests, "get", fake_get)
    loader = SeedLoader(url="http://seed.local/channels.json", timeout=2)
    assert loader.fetch() == [{'name': "Remote"}]
    assert calls == [("http://seed.local/channels.json", 2)]


def test_url_failures_return_none(monkeypatch):
    def unreachable(url, timeout):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(requests, "get", unreachable)
    assert SeedLoader(url="http://seed.local/").fetch() is None

    monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse([], status=404))
    assert SeedLoader(url="http://seed.local/").fetch() is None

    monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(ValueError("bad json")))
    assert SeedLoader(url="http://seed.local/").fetch() is None


def test_fetch_from_file(tmp_path):
    seed = tmp_path / "channels.json"
    seed.write_text(json.dumps([{'name': "Local"}]))
    assert SeedLoader(url="", path=seed).fetch() == [{'name': "Local"}]


def test_missing_or_invalid_file(tmp_path):
    assert SeedLoader(url="", path=tmp_path / "nope.json").fetch() is None
    bad = tmp_path / "bad.json"
    bad.write_text('{"name": "not a list"}')
    assert SeedLoader(url="", path=bad).fetch() is None


def test_default_channels_are_copies():
    first = default_channels()
    first[0]['name'] = "Changed"
    assert default_channels()[0]['name'] == "Lofi Girl"
    assert len(first) == 4
