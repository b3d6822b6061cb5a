"""Record-or-replay regression snapshots for tests.

The first run of a test records the values it checks; later runs compare
against that recording and fail with a line diff on any change.
"""

from regtest.config import DEFAULT_CONFIG, RegTestConfig, load_config
from regtest.diff import diff_lines
from regtest.errors import (
    ContentMismatch,
    CorruptSnapshot,
    KindMismatch,
    MissingEntries,
    RegTestError,
    SessionClosed,
    SnapshotMismatch,
    SnapshotWriteError,
    UnexpectedExtraEntry,
)
from regtest.location import resolve_location
from regtest.snapshot import Entry, EntryKind
from regtest.store import RegTest, SnapshotMode, create

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "RegTest",
    "SnapshotMode",
    "create",
    "Entry",
    "EntryKind",
    "diff_lines",
    "resolve_location",
    "RegTestConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "RegTestError",
    "CorruptSnapshot",
    "SnapshotWriteError",
    "SessionClosed",
    "SnapshotMismatch",
    "UnexpectedExtraEntry",
    "KindMismatch",
    "ContentMismatch",
    "MissingEntries",
]
