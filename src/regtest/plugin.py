"""pytest integration for regression snapshots.

Enable it from a ``conftest.py``:

    pytest_plugins = ["regtest.plugin"]

and request the ``regtest`` fixture:

    def test_add(regtest):
        regtest.check(add(2, 2))
        regtest.check_repr([1, 2, 3])

The first run records ``regtest_data/tests/<module>/test_add.json``; later
runs compare against it.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from regtest.config import RegTestConfig, load_config
from regtest.location import resolve_location
from regtest.store import RegTest, create

CONFIG_KEY = pytest.StashKey[RegTestConfig]()
_REPORTS_KEY = pytest.StashKey[dict]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("regtest", "regression snapshot testing")
    group.addoption(
        "--regtest-data-dir",
        default=None,
        help="Snapshot directory name (default: regtest_data)",
    )
    group.addoption(
        "--regtest-config",
        default=None,
        type=Path,
        help="YAML file with regtest settings",
    )
    group.addoption(
        "--regtest-allow-missing",
        action="store_true",
        default=False,
        help="Do not fail tests that check fewer values than their snapshot holds",
    )


def pytest_configure(config: pytest.Config) -> None:
    config_path = config.getoption("--regtest-config")
    base = load_config(config_path) if config_path else RegTestConfig.from_env()

    config.stash[CONFIG_KEY] = base.with_overrides(
        data_dir_name=config.getoption("--regtest-data-dir"),
        fail_on_missing_entries=False if config.getoption("--regtest-allow-missing") else None,
    )


def pytest_report_header(config: pytest.Config) -> str:
    settings = config.stash[CONFIG_KEY]
    return (
        f"regtest: data_dir={settings.data_dir_name}, "
        f"fail_on_missing_entries={settings.fail_on_missing_entries}"
    )


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()
    item.stash.setdefault(_REPORTS_KEY, {})[report.when] = report


@pytest.fixture
def regtest(request: pytest.FixtureRequest):
    """Regression session bound to the requesting test.

    The session is finalized at teardown whatever the test outcome. The
    check for unconsumed entries only applies when the test body passed.
    """
    settings = request.config.stash[CONFIG_KEY]
    node = request.node
    cls = getattr(node, "cls", None)

    location = resolve_location(
        node.path,
        node.name,
        data_dir_name=settings.data_dir_name,
        class_name=cls.__qualname__ if cls is not None else None,
    )
    session: RegTest = create(location, config=settings)

    yield session

    call_report = node.stash.get(_REPORTS_KEY, {}).get("call")
    session.finalize(check_missing=call_report is not None and call_report.passed)
