"""
Configuration for regression snapshot sessions.

Supports:
- Environment variable configuration
- YAML file configuration
- Runtime overrides (pytest command line options)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

DEFAULT_DATA_DIR_NAME = "regtest_data"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of true/false/1/0/yes/no/on/off, got {value!r}")


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(name, value)
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class RegTestConfig:
    """
    Settings shared by every session of a test run.

    Attributes:
        data_dir_name: Directory name holding snapshots, created beside the
            ``tests`` or ``src`` directory of the test file
        fail_on_missing_entries: Fail a passing test that checked fewer
            values than its snapshot holds
        indent: JSON indentation used when writing snapshots
    """

    data_dir_name: str = DEFAULT_DATA_DIR_NAME
    fail_on_missing_entries: bool = True
    indent: int = 2

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.data_dir_name or "/" in self.data_dir_name or "\\" in self.data_dir_name:
            raise ValueError(f"data_dir_name must be a single directory name, got {self.data_dir_name!r}")

        if self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")

    @classmethod
    def from_env(cls) -> RegTestConfig:
        """
        Create configuration from environment variables.

        Environment variables:
            REGTEST_DATA_DIR: Snapshot directory name
            REGTEST_FAIL_ON_MISSING: Enforce consumption of all entries (true/false)
            REGTEST_INDENT: JSON indentation for written snapshots
        """
        return cls(
            data_dir_name=os.getenv("REGTEST_DATA_DIR", DEFAULT_DATA_DIR_NAME),
            fail_on_missing_entries=_parse_bool(
                "REGTEST_FAIL_ON_MISSING", os.getenv("REGTEST_FAIL_ON_MISSING", "true")
            ),
            indent=int(os.getenv("REGTEST_INDENT", "2")),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegTestConfig:
        """Create configuration from dictionary (e.g., YAML)."""
        return cls(
            data_dir_name=data.get("data_dir_name", DEFAULT_DATA_DIR_NAME),
            fail_on_missing_entries=_coerce_bool(
                "fail_on_missing_entries", data.get("fail_on_missing_entries", True)
            ),
            indent=int(data.get("indent", 2)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "data_dir_name": self.data_dir_name,
            "fail_on_missing_entries": self.fail_on_missing_entries,
            "indent": self.indent,
        }

    def with_overrides(self, **overrides: Any) -> RegTestConfig:
        """Return a copy with non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: Path) -> RegTestConfig:
    """Load configuration from a YAML file.

    The file may hold the settings at top level or under a ``regtest`` key.

    Raises:
        ValueError: If the file does not contain a mapping
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Invalid regtest config format in {path}")

    section = data.get("regtest", data)
    if not isinstance(section, dict):
        raise ValueError(f"Invalid regtest config format in {path}")

    return RegTestConfig.from_dict(section)


DEFAULT_CONFIG = RegTestConfig()
