"""Line-oriented diff reporting for snapshot mismatches.

The report walks both texts index by index instead of aligning them, so
removals and additions inside a differing region are grouped into blocks:

    diff_lines("a\\nb\\nc", "a\\nx\\nc")

      a
    - b
    + x
      c

It is intended for a human reading a failure message. Inside a differing
block the pairing of removed and added lines is positional only.
"""

from __future__ import annotations

CONTEXT_PREFIX = "  "
REMOVED_PREFIX = "- "
ADDED_PREFIX = "+ "


def split_lines(text: str) -> list[str]:
    """Split text into lines on ``\\n``.

    A ``\\r`` is dropped only when it precedes a ``\\n``, so ``\\r\\n`` endings
    match ``\\n`` ones while a lone trailing ``\\r`` is kept. A final newline
    does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    terminated = len(lines) - 1
    if lines[-1] == "":
        lines.pop()
    return [
        line[:-1] if i < terminated and line.endswith("\r") else line
        for i, line in enumerate(lines)
    ]


def diff_lines(expected: str, actual: str) -> str:
    """Build a block-grouped line diff of two texts.

    Args:
        expected: Baseline text
        actual: Newly produced text

    Returns:
        Report with one ``\\n``-terminated line per output line. Equal lines
        are prefixed with two spaces, removed lines with ``- `` and added
        lines with ``+ ``.
    """
    exp_lines = split_lines(expected)
    act_lines = split_lines(actual)

    out: list[str] = []
    removed: list[str] = []
    added: list[str] = []

    def flush() -> None:
        out.extend(f"{REMOVED_PREFIX}{line}\n" for line in removed)
        out.extend(f"{ADDED_PREFIX}{line}\n" for line in added)
        removed.clear()
        added.clear()

    for i in range(max(len(exp_lines), len(act_lines))):
        exp = exp_lines[i] if i < len(exp_lines) else ""
        act = act_lines[i] if i < len(act_lines) else ""

        if exp != act:
            if exp:
                removed.append(exp)
            if act:
                added.append(act)
            continue

        flush()
        out.append(f"{CONTEXT_PREFIX}{exp}\n")

    flush()
    return "".join(out)
