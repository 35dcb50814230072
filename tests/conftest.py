"""Pytest configuration and fixtures."""

import json

import pytest

from json_tidy import to_tbl_json


@pytest.fixture
def purchases_json():
    """Customers with nested purchases and items."""
    return json.dumps([
        {
            "name": "bob",
            "purchases": [
                {"date": "2014/09/13", "items": [{"name": "shoes", "price": 187}]},
                {"date": "2014/10/10", "items": [{"name": "hat", "price": 10.5},
                                                  {"name": "belt", "price": 25}]}
            ]
        },
        {
            "name": "susan",
            "purchases": [
                {"date": "2014/08/01", "items": []}
            ]
        },
        {
            "name": "sam",
            "purchases": []
        }
    ])


@pytest.fixture
def ragged_documents():
    """Documents of every JSON kind, one each."""
    return ['{"a": 1, "b": "x"}', '[1, 2, 3]', '"text"', '42', 'true', 'null']


@pytest.fixture
def ragged_tbl(ragged_documents):
    """TblJson built from ragged_documents."""
    return to_tbl_json(ragged_documents)


@pytest.fixture
def people_tbl():
    """Objects with varying keys and value kinds."""
    return to_tbl_json([
        '{"name": "alice", "age": 30, "active": true, "address": {"city": "Paris", "zip": "75001"}}',
        '{"name": "bob", "age": "unknown", "tags": ["a", "b"]}',
        '{"age": 41.5, "address": {"city": null}}',
        '[1, 2]',
    ])


@pytest.fixture
def json_file(tmp_path):
    """A file holding a single JSON document."""
    path = tmp_path / "people.json"
    path.write_text(json.dumps([
        {"name": "alice", "age": 30},
        {"name": "bob", "age": 25, "pets": ["cat"]},
    ]), encoding="utf-8")
    return path


@pytest.fixture
def json_lines_file(tmp_path):
    """A JSON Lines file with one document per line."""
    path = tmp_path / "events.jsonl"
    path.write_text('{"event": "login"}\n\n[1, 2]\n"done"\n', encoding="utf-8")
    return path
