"""Record-or-compare regression sessions.

A session is bound to one snapshot file. If the file does not exist yet the
session records every submitted value and writes them out once, when it is
finalized. If it exists, every submitted value is checked against the next
recorded entry and the first disagreement fails the test.

Usage:
    with create(path) as rt:
        rt.check(add(2, 2))
        rt.check_repr([1, 2, 3])
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from regtest.config import DEFAULT_CONFIG, RegTestConfig
from regtest.diff import diff_lines
from regtest.errors import (
    ContentMismatch,
    KindMismatch,
    MissingEntries,
    SessionClosed,
    UnexpectedExtraEntry,
)
from regtest.snapshot import Entry, EntryKind, load_snapshot, write_snapshot

logger = logging.getLogger(__name__)


class SnapshotMode(Enum):
    """Whether a session is producing or checking a snapshot."""
    RECORD = "record"
    COMPARE = "compare"


class RegTest:
    """Session mediating one test's observations against its snapshot.

    Attributes:
        location: Snapshot file path
        config: Settings used for writing and finalize checks
        mode: Fixed at creation from whether ``location`` exists
        buffer: Entries recorded so far (RECORD) or loaded from disk (COMPARE)
        cursor: Index of the next expected entry (COMPARE only)
    """

    def __init__(self, location: Path | str, config: RegTestConfig | None = None):
        self.location = Path(location)
        self.config = config or DEFAULT_CONFIG
        self.cursor = 0
        self.closed = False
        self.failed = False

        if self.location.exists():
            self.buffer: list[Entry] = load_snapshot(self.location)
            self.mode = SnapshotMode.COMPARE
        else:
            self.buffer = []
            self.mode = SnapshotMode.RECORD

        logger.debug("Regression session for %s in %s mode", self.location, self.mode.value)

    def __repr__(self) -> str:
        return f"RegTest(location={str(self.location)!r}, mode={self.mode.value})"

    def __enter__(self) -> RegTest:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finalize(check_missing=exc_type is None)

    @property
    def remaining(self) -> int:
        """Number of recorded entries not yet checked (COMPARE only)."""
        if self.mode is SnapshotMode.RECORD:
            return 0
        return len(self.buffer) - self.cursor

    def check(self, value: Any) -> None:
        """Check a value rendered with ``str()``."""
        self.submit(str(value), EntryKind.DISPLAY)

    def check_repr(self, value: Any) -> None:
        """Check a value rendered with ``repr()``."""
        self.submit(repr(value), EntryKind.DEBUG)

    def submit(self, text: str, kind: EntryKind) -> None:
        """Record or check one rendered observation.

        Args:
            text: Rendered value
            kind: Rendering used to produce ``text``

        Raises:
            SessionClosed: If the session was already finalized
            UnexpectedExtraEntry: If the snapshot has no entry left to compare
            KindMismatch: If the recorded entry used another rendering
            ContentMismatch: If the recorded text differs
        """
        if self.closed:
            raise SessionClosed(self.location)

        if self.mode is SnapshotMode.RECORD:
            self.buffer.append(Entry(kind=kind, text=text))
            return

        if self.cursor >= len(self.buffer):
            self.failed = True
            raise UnexpectedExtraEntry(self.location, self.cursor, text)

        index = self.cursor
        expected = self.buffer[index]
        self.cursor += 1

        if expected.kind is not kind:
            self.failed = True
            raise KindMismatch(
                self.location,
                index,
                expected.kind.value,
                kind.value,
                expected.text,
                text,
            )

        if expected.text != text:
            self.failed = True
            raise ContentMismatch(
                self.location,
                index,
                expected.text,
                text,
                diff_lines(expected.text, text),
            )

    def finalize(self, check_missing: bool = True) -> None:
        """Close the session, writing the snapshot in RECORD mode.

        Only the first call has any effect.

        Args:
            check_missing: Enforce that every recorded entry was checked.
                Callers pass False when the test has already failed.

        Raises:
            SnapshotWriteError: If the recorded snapshot cannot be written
            MissingEntries: If recorded entries were left unchecked
        """
        if self.closed:
            return
        self.closed = True

        if self.mode is SnapshotMode.RECORD:
            write_snapshot(self.location, self.buffer, indent=self.config.indent)
            return

        if self.failed or not check_missing or self.remaining == 0:
            return

        if self.config.fail_on_missing_entries:
            raise MissingEntries(self.location, self.cursor, len(self.buffer))

        logger.warning(
            "%d of %d regression entries in %s were never checked",
            self.remaining,
            len(self.buffer),
            self.location,
        )


def create(location: Path | str, config: RegTestConfig | None = None) -> RegTest:
    """Open a regression session bound to ``location``.

    Raises:
        CorruptSnapshot: If a snapshot exists but cannot be parsed
    """
    return RegTest(location, config=config)
