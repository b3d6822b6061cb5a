"""Tests for the snapshot file format."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from regtest.errors import CorruptSnapshot
from regtest.snapshot import (
    Entry,
    EntryKind,
    dump_snapshot,
    load_snapshot,
    parse_snapshot,
    validate_snapshot_data,
    write_snapshot,
)


class TestEntry:
    """Tests for Entry."""

    def test_equality_requires_kind_and_text(self):
        assert Entry(EntryKind.DISPLAY, "x") == Entry(EntryKind.DISPLAY, "x")
        assert Entry(EntryKind.DISPLAY, "x") != Entry(EntryKind.DEBUG, "x")
        assert Entry(EntryKind.DISPLAY, "x") != Entry(EntryKind.DISPLAY, "y")

    def test_entries_are_immutable(self):
        entry = Entry(EntryKind.DISPLAY, "x")
        with pytest.raises(AttributeError):
            entry.text = "y"  # type: ignore[misc]

    def test_to_dict(self):
        assert Entry(EntryKind.DEBUG, "[1]").to_dict() == {"type": "debug", "message": "[1]"}

    def test_from_dict(self):
        entry = Entry.from_dict({"type": "display", "message": "4"})
        assert entry == Entry(EntryKind.DISPLAY, "4")


class TestSchema:
    """Tests for snapshot schema validation."""

    def test_valid_data(self):
        data = [{"type": "display", "message": "a"}, {"type": "debug", "message": "'a'"}]
        assert validate_snapshot_data(data) == []

    def test_errors_name_the_offending_entry(self):
        data = [{"type": "display", "message": "a"}, {"type": "other", "message": "b"}]
        errors = validate_snapshot_data(data)

        assert len(errors) == 1
        assert errors[0].startswith("$[1].type")

    def test_top_level_must_be_array(self):
        assert validate_snapshot_data({"entries": []})


class TestSerialization:
    """Tests for reading and writing snapshot files."""

    def test_dump_matches_recorded_layout(self):
        content = dump_snapshot([Entry(EntryKind.DISPLAY, "4")])
        assert content == '[\n  {\n    "type": "display",\n    "message": "4"\n  }\n]\n'

    def test_parse_preserves_order(self):
        text = json.dumps([
            {"type": "display", "message": "2"},
            {"type": "display", "message": "1"},
            {"type": "display", "message": "2"},
        ])
        entries = parse_snapshot(text, Path("snap.json"))
        assert [e.text for e in entries] == ["2", "1", "2"]

    def test_key_order_is_not_significant(self):
        text = '[{"message": "4", "type": "debug"}]'
        assert parse_snapshot(text, Path("snap.json")) == [Entry(EntryKind.DEBUG, "4")]

    def test_write_then_load(self, tmp_path):
        path = tmp_path / "snap.json"
        entries = [Entry(EntryKind.DISPLAY, "a\nb"), Entry(EntryKind.DEBUG, "'a\\nb'")]
        write_snapshot(path, entries)

        assert load_snapshot(path) == entries

    def test_write_replaces_existing_file(self, tmp_path):
        path = tmp_path / "snap.json"
        write_snapshot(path, [Entry(EntryKind.DISPLAY, "old")] * 3)
        write_snapshot(path, [Entry(EntryKind.DISPLAY, "new")])

        assert load_snapshot(path) == [Entry(EntryKind.DISPLAY, "new")]
        assert [p.name for p in tmp_path.iterdir()] == ["snap.json"]

    def test_load_invalid_utf8(self, tmp_path):
        path = tmp_path / "snap.json"
        path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(CorruptSnapshot):
            load_snapshot(path)
