"""Resolve where a test's snapshot lives.

Snapshots are kept in a data directory next to the ``tests`` (or ``src``)
directory that contains the test module, mirroring the module's path:

    project/tests/api/test_users.py::test_list
        -> project/regtest_data/tests/api/test_users/test_list.json

    project/src/pkg/util.py::test_parse
        -> project/regtest_data/src/pkg/util/test_parse.json

A module outside both layouts keeps its snapshots beside itself.
"""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

from regtest.config import DEFAULT_DATA_DIR_NAME

INTEGRATION_ROOT = "tests"
UNIT_ROOT = "src"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.\-\[\]]")
# outside the safe set, so a hashed name never equals an unchanged one
_HASH_SEPARATOR = "~"


def sanitize_name(name: str) -> str:
    """Make a test name safe for use as a file name.

    Parametrized ids can contain path separators and other characters that
    are not portable, so anything outside ``[A-Za-z0-9_.-[]]`` becomes ``_``.
    When that changes the name, ``~`` and a digest of the original name are
    appended so that ids differing only in replaced characters stay apart.
    """
    safe = _UNSAFE_CHARS.sub("_", name)
    if safe in ("", ".", ".."):
        raise ValueError(f"Cannot derive a snapshot file name from test name {name!r}")
    if safe != name:
        digest = hashlib.blake2b(name.encode("utf-8"), digest_size=6).hexdigest()
        safe = f"{safe}{_HASH_SEPARATOR}{digest}"
    return safe


def _find_root(path: Path) -> tuple[Path, str] | None:
    """Find the nearest ``tests`` ancestor, else the nearest ``src`` one."""
    for marker in (INTEGRATION_ROOT, UNIT_ROOT):
        for ancestor in path.parents:
            if ancestor.name == marker:
                return ancestor, marker
    return None


def snapshot_dir(test_file: Path | str, data_dir_name: str = DEFAULT_DATA_DIR_NAME) -> Path:
    """Directory holding the snapshots of every test in ``test_file``."""
    path = Path(test_file).resolve()

    found = _find_root(path)
    if found is None:
        return path.parent / data_dir_name / path.stem

    root, marker = found
    relative = path.parent.relative_to(root)
    return root.parent / data_dir_name / marker / relative / path.stem


def resolve_location(
    test_file: Path | str,
    test_name: str,
    data_dir_name: str = DEFAULT_DATA_DIR_NAME,
    class_name: str | None = None,
) -> Path:
    """Resolve the snapshot file for one test.

    The result is deterministic for a given test and distinct for tests
    with different modules, classes or names. No directories are created.

    Args:
        test_file: Module declaring the test
        test_name: Test function name, including any parametrize id
        data_dir_name: Name of the snapshot data directory
        class_name: Qualified name of the enclosing test class, if any;
            each dotted segment becomes one directory level

    Returns:
        Path of the JSON snapshot file
    """
    base = snapshot_dir(test_file, data_dir_name)
    if class_name:
        for segment in class_name.split("."):
            base = base / sanitize_name(segment)
    return base / f"{sanitize_name(test_name)}.json"
