"""Snapshot data model and on-disk format.

A snapshot is a JSON array of entries, one per observed value, in the order
the test produced them:

    [
      {
        "type": "display",
        "message": "4"
      },
      {
        "type": "debug",
        "message": "[1, 2, 3]"
      }
    ]
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from regtest.errors import CorruptSnapshot, SnapshotWriteError

logger = logging.getLogger(__name__)


class EntryKind(Enum):
    """How an observed value was rendered to text."""
    DISPLAY = "display"  # str()
    DEBUG = "debug"      # repr()


@dataclass(frozen=True)
class Entry:
    """One recorded observation.

    Attributes:
        kind: Rendering used to produce ``text``
        text: Rendered form of the observed value
    """

    kind: EntryKind
    text: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the persisted object form."""
        return {"type": self.kind.value, "message": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        """Create from the persisted object form."""
        return cls(kind=EntryKind(data["type"]), text=data["message"])


SNAPSHOT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": [k.value for k in EntryKind]},
            "message": {"type": "string"},
        },
        "required": ["type", "message"],
        "additionalProperties": False,
    },
}

_validator = Draft202012Validator(SNAPSHOT_SCHEMA)


def validate_snapshot_data(data: Any) -> list[str]:
    """Validate decoded JSON against the snapshot schema.

    Returns:
        List of error messages, empty when valid
    """
    return [
        f"{error.json_path}: {error.message}"
        for error in sorted(_validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    ]


def parse_snapshot(text: str, location: Path) -> list[Entry]:
    """Parse snapshot file content into entries.

    Raises:
        CorruptSnapshot: If the content is not JSON or violates the schema
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptSnapshot(location, f"invalid JSON: {e}") from e

    errors = validate_snapshot_data(data)
    if errors:
        raise CorruptSnapshot(location, "unexpected snapshot structure", errors)

    return [Entry.from_dict(item) for item in data]


def load_snapshot(location: Path) -> list[Entry]:
    """Read and fully parse the snapshot stored at ``location``.

    Raises:
        CorruptSnapshot: If the file cannot be read or parsed
    """
    try:
        text = location.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CorruptSnapshot(location, str(e)) from e

    entries = parse_snapshot(text, location)
    logger.debug("Loaded %d regression entries from %s", len(entries), location)
    return entries


def dump_snapshot(entries: list[Entry], indent: int = 2) -> str:
    """Serialize entries to snapshot file content."""
    return json.dumps([e.to_dict() for e in entries], indent=indent, ensure_ascii=False) + "\n"


def write_snapshot(location: Path, entries: list[Entry], indent: int = 2) -> None:
    """Atomically replace the snapshot at ``location`` with ``entries``.

    Content goes to a temporary file in the target directory which is then
    renamed over the target, so a failed write never leaves a truncated
    snapshot behind.

    Raises:
        SnapshotWriteError: If the directory or file cannot be written
    """
    content = dump_snapshot(entries, indent=indent)
    tmp_path: str | None = None
    try:
        location.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{location.name}.", suffix=".tmp", dir=location.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, location)
    except OSError as e:
        logger.error("Failed to write regression snapshot %s: %s", location, e)
        if tmp_path is not None:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
        raise SnapshotWriteError(location, str(e)) from e

    logger.info("Wrote %d regression entries to %s", len(entries), location)
