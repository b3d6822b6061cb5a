"""Run the test suite, then replay it against freshly recorded snapshots.

Three passes:
    1. the suite against the committed ``regtest_data`` snapshots
    2. a record pass writing every snapshot into a scratch data directory
    3. a compare pass checking the suite against what pass 2 recorded

The scratch directory is removed afterwards.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def build_command(*extra: str) -> list[str]:
    """pytest command line for one pass."""
    return [
        sys.executable,
        "-m",
        "pytest",
        "tests/",
        "--tb=short",
        "--strict-markers",
        "-p",
        "no:cacheprovider",
        *extra,
    ]


def run(command: list[str]) -> int:
    return subprocess.call(command, cwd=ROOT)


def main() -> int:
    """Run all passes, stopping at the first failing one."""
    if sys.version_info < (3, 10):
        print("regtest tests require Python 3.10+; skipping.")
        return 0

    status = run(build_command("-v"))
    if status:
        return status

    scratch = f".regtest_scratch_{os.getpid()}"
    try:
        print(f"Recording snapshots into {scratch}")
        status = run(build_command("-q", "--regtest-data-dir", scratch))
        if status:
            return status
        if not (ROOT / scratch).is_dir():
            print(f"Record pass wrote no snapshots into {scratch}")
            return 1

        print(f"Comparing against snapshots in {scratch}")
        return run(build_command("-q", "--regtest-data-dir", scratch))
    finally:
        shutil.rmtree(ROOT / scratch, ignore_errors=True)


if __name__ == "__main__":
    raise SystemExit(main())
