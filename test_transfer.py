"""Tests for import document parsing and export serialization."""

import json
from datetime import date

import pytest

from live_tv.errors import FormatError
from live_tv.models import Channel
from live_tv.transfer import export_channels, export_filename, parse_import


def make_channel(**overrides):
    data = {
        'id': 1, 'name': "Lofi Girl", 'url': "https://youtu.be/jfKfPfyJRdk",
        'type': "youtube", 'category': "music", 'description': "beats",
        'createdAt': "2024-05-01T12:00:00.000Z", 'updatedAt': "2024-05-01T12:00:00.000Z",
    }
    data.update(overrides)
    return Channel.from_dict(data)


def test_export_is_pretty_json_with_stable_field_order():
    document = export_channels([make_channel()])
    assert document.startswith("[\n  {\n    \"id\": 1,")
    record = json.loads(document)[0]
    assert list(record) == ["id", "name", "url", "type", "category", "description",
                            "status", "createdAt", "updatedAt"]
    assert record['status'] == "active"


def test_export_filename():
    assert export_filename(date(2024, 5, 1)) == "channels-backup-2024-05-01.json"


def test_one_valid_one_missing_name():
    document = json.dumps([
        {'name': "Good", 'url': "https://youtu.be/a", 'type': "youtube", 'category': "music"},
        {'url': "https://youtu.be/b", 'type': "youtube", 'category': "music"},
    ])
    result = parse_import(document)
    assert len(result.accepted) == 1
    assert result.rejected_count == 1
    assert result.accepted[0].name == "Good"
    assert result.accepted[0].id is None


def test_import_does_not_recheck_urls_by_default():
    result = parse_import([{'name': "Odd", 'url': "https://example.com/x",
                            'type': "youtube", 'category': "music"}])
    assert result.accepted[0].url == "https://example.com/x"


def test_strict_import_rejects_invalid_urls():
    with pytest.raises(FormatError):
        parse_import([{'name': "Odd", 'url': "https://example.com/x",
                       'type': "youtube", 'category': "music"}], strict=True)


@pytest.mark.parametrize("candidate", [
    "not an object",
    {'name': "X", 'url': "u", 'type': "vimeo", 'category': "music"},
    {'name': "X", 'url': "u", 'type': "youtube", 'category': "music", 'id': "abc"},
    {'name': "X", 'url': "u", 'type': "youtube", 'category': ""},
])
def test_unusable_candidates_are_rejected(candidate):
    document = [candidate, {'name': "Ok", 'url': "https://youtu.be/a",
                            'type': "youtube", 'category': "music"}]
    result = parse_import(document)
    assert result.rejected_count == 1
    assert [c.name for c in result.accepted] == ["Ok"]


@pytest.mark.parametrize("document", [
    "{not json",
    '{"name": "single object"}',
    "[]",
    '[{"name": "no url"}]',
    b"\xff\xfe\x00",
])
def test_format_errors(document):
    with pytest.raises(FormatError):
        parse_import(document)


def test_bytes_with_bom_are_accepted():
    raw = "\ufeff" + json.dumps([{'name': "A", 'url': "https://youtu.be/a",
                                  'type': "YouTube", 'category': "music"}])
    result = parse_import(raw.encode("utf-8"))
    assert result.accepted[0].type.value == "youtube"


@pytest.mark.parametrize("raw,expected", [
    ("2024-05-01T12:00:00.000Z", "2024-05-01T12:00:00.000Z"),
    ("2024-05-01T14:00:00+02:00", "2024-05-01T12:00:00.000Z"),
    (1714564800000, "2024-05-01T12:00:00.000Z"),
    ("not a date", None),
    (True, None),
    ([2024], None),
    (None, None),
])
def test_timestamps_are_normalized(raw, expected):
    channel = make_channel(createdAt=raw, updatedAt=raw)
    assert channel.created_at == expected
    assert channel.updated_at == expected
