"""Exception taxonomy for regression snapshot sessions.

Every error raised by a session is terminal for the test that owns it.
Comparison failures also subclass ``AssertionError`` so test runners report
them as ordinary test failures rather than errors.
"""

from __future__ import annotations

from pathlib import Path


class RegTestError(Exception):
    """Base class for all regression snapshot errors."""
    pass


class CorruptSnapshot(RegTestError):
    """Existing snapshot file could not be read or parsed."""

    def __init__(self, location: Path, reason: str, errors: list[str] | None = None):
        self.location = location
        self.reason = reason
        self.errors = errors or []
        message = f"Failed to read regression snapshot {location}: {reason}"
        if self.errors:
            message += "\n" + "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(message)


class SnapshotWriteError(RegTestError):
    """Recorded entries could not be persisted."""

    def __init__(self, location: Path, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Failed to write regression snapshot {location}: {reason}")


class SessionClosed(RegTestError):
    """A value was submitted after the session was finalized."""

    def __init__(self, location: Path):
        self.location = location
        super().__init__(f"Regression session for {location} is already finalized")


class SnapshotMismatch(RegTestError, AssertionError):
    """Base class for observations that disagree with the stored snapshot.

    Attributes:
        location: Snapshot file being compared against
        index: Position of the offending entry in the snapshot
    """

    def __init__(self, message: str, location: Path, index: int):
        self.location = location
        self.index = index
        super().__init__(message)


class UnexpectedExtraEntry(SnapshotMismatch):
    """The test produced more observations than the snapshot holds."""

    def __init__(self, location: Path, index: int, text: str):
        self.text = text
        super().__init__(
            "No more regression entries in snapshot, but test expected more.\n"
            f"Snapshot: {location} ({index} entries)\n"
            f"Extra value: {text}",
            location,
            index,
        )


class KindMismatch(SnapshotMismatch):
    """The value was rendered differently from when it was recorded."""

    def __init__(
        self,
        location: Path,
        index: int,
        expected_kind: str,
        actual_kind: str,
        expected: str,
        actual: str,
    ):
        self.expected_kind = expected_kind
        self.actual_kind = actual_kind
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Regression data generated in different ways: "
            f"expected {expected_kind}, got {actual_kind} "
            f"(entry {index} of {location})\n"
            f"Expected: {expected}\n"
            f"Actual:   {actual}",
            location,
            index,
        )


class ContentMismatch(SnapshotMismatch):
    """The rendered text differs from the recorded text."""

    def __init__(self, location: Path, index: int, expected: str, actual: str, diff: str):
        self.expected = expected
        self.actual = actual
        self.diff = diff
        super().__init__(
            f"Regression message mismatch (entry {index} of {location}):\n"
            f"Expected: {expected}\n"
            f"Actual:   {actual}\n"
            "\n"
            f"Diff:\n{diff}",
            location,
            index,
        )


class MissingEntries(SnapshotMismatch):
    """The test finished before consuming every recorded entry."""

    def __init__(self, location: Path, consumed: int, total: int):
        self.consumed = consumed
        self.total = total
        super().__init__(
            f"Test produced {consumed} regression entries, "
            f"but snapshot {location} holds {total}; "
            f"{total - consumed} recorded entries were never checked.",
            location,
            consumed,
        )
