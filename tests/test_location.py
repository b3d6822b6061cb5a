"""Tests for snapshot location resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from regtest.location import resolve_location, sanitize_name, snapshot_dir


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path.resolve()


class TestSnapshotDir:
    """Tests for per-module snapshot directories."""

    def test_integration_test_module(self, root):
        test_file = root / "project" / "tests" / "test_users.py"
        assert snapshot_dir(test_file) == root / "project" / "regtest_data" / "tests" / "test_users"

    def test_nested_integration_test_module(self, root):
        test_file = root / "project" / "tests" / "api" / "v1" / "test_users.py"
        expected = root / "project" / "regtest_data" / "tests" / "api" / "v1" / "test_users"
        assert snapshot_dir(test_file) == expected

    def test_unit_test_module_under_src(self, root):
        test_file = root / "project" / "src" / "pkg" / "util.py"
        expected = root / "project" / "regtest_data" / "src" / "pkg" / "util"
        assert snapshot_dir(test_file) == expected

    def test_tests_directory_takes_precedence_over_src(self, root):
        test_file = root / "project" / "src" / "pkg" / "tests" / "test_util.py"
        expected = root / "project" / "src" / "pkg" / "regtest_data" / "tests" / "test_util"
        assert snapshot_dir(test_file) == expected

    def test_nearest_tests_directory_wins(self, root):
        test_file = root / "tests" / "fixtures" / "tests" / "test_a.py"
        expected = root / "tests" / "fixtures" / "regtest_data" / "tests" / "test_a"
        assert snapshot_dir(test_file) == expected

    def test_module_outside_known_layouts(self, root):
        test_file = root / "scratch" / "check_things.py"
        assert snapshot_dir(test_file) == root / "scratch" / "regtest_data" / "check_things"

    def test_custom_data_dir_name(self, root):
        test_file = root / "tests" / "test_a.py"
        assert snapshot_dir(test_file, "golden") == root / "golden" / "tests" / "test_a"

    def test_relative_paths_are_resolved(self, root, monkeypatch):
        monkeypatch.chdir(root)
        assert snapshot_dir(Path("tests/test_a.py")) == root / "regtest_data" / "tests" / "test_a"


class TestResolveLocation:
    """Tests for per-test snapshot files."""

    def test_function_test(self, root):
        location = resolve_location(root / "tests" / "test_math.py", "test_add")
        assert location == root / "regtest_data" / "tests" / "test_math" / "test_add.json"

    def test_class_test(self, root):
        location = resolve_location(
            root / "tests" / "test_math.py", "test_add", class_name="TestAdd"
        )
        assert location == root / "regtest_data" / "tests" / "test_math" / "TestAdd" / "test_add.json"

    def test_same_test_resolves_identically(self, root):
        test_file = root / "tests" / "test_math.py"
        assert resolve_location(test_file, "test_add") == resolve_location(test_file, "test_add")

    def test_distinct_tests_resolve_distinctly(self, root):
        locations = {
            resolve_location(root / "tests" / "test_a.py", "test_x"),
            resolve_location(root / "tests" / "test_b.py", "test_x"),
            resolve_location(root / "tests" / "test_a.py", "test_y"),
            resolve_location(root / "tests" / "test_a.py", "test_x", class_name="TestA"),
            resolve_location(root / "src" / "test_a.py", "test_x"),
        }
        assert len(locations) == 5

    def test_parametrized_name(self, root):
        location = resolve_location(root / "tests" / "test_a.py", "test_x[a/b-1]")
        assert location.name.startswith("test_x[a_b-1]~")
        assert location.suffix == ".json"
        assert location.parent == root / "regtest_data" / "tests" / "test_a"

    def test_ids_differing_in_replaced_characters_stay_distinct(self, root):
        test_file = root / "tests" / "test_a.py"
        names = ["test_v[hello world]", "test_v[hello_world]", "test_v[hello/world]", "test_v[héllo_world]"]
        locations = {resolve_location(test_file, name) for name in names}
        assert len(locations) == len(names)

    def test_nested_classes_get_one_level_per_class(self, root):
        test_file = root / "tests" / "test_n.py"
        first = resolve_location(test_file, "test_v", class_name="TestA.TestInner")
        second = resolve_location(test_file, "test_v", class_name="TestB.TestInner")

        assert first == root / "regtest_data" / "tests" / "test_n" / "TestA" / "TestInner" / "test_v.json"
        assert second == root / "regtest_data" / "tests" / "test_n" / "TestB" / "TestInner" / "test_v.json"

    def test_no_directories_are_created(self, root):
        resolve_location(root / "tests" / "test_a.py", "test_x")
        assert not (root / "regtest_data").exists()


class TestSanitizeName:
    """Tests for sanitize_name."""

    @pytest.mark.parametrize(
        "name",
        ["test_plain", "test_x[1-2]", "test_x[1.5]", "test_x[a_b]"],
    )
    def test_safe_names_are_unchanged(self, name):
        assert sanitize_name(name) == name

    @pytest.mark.parametrize(
        "name,prefix",
        [
            ("test_x[a b]", "test_x[a_b]~"),
            ("test_x[a/b\\c]", "test_x[a_b_c]~"),
            ("test_x[ü]", "test_x[_]~"),
        ],
    )
    def test_changed_names_get_a_digest(self, name, prefix):
        safe = sanitize_name(name)
        assert safe.startswith(prefix)
        assert len(safe) == len(prefix) + 12
        assert sanitize_name(name) == safe

    @pytest.mark.parametrize("name", ["", ".", ".."])
    def test_rejects_unusable_names(self, name):
        with pytest.raises(ValueError):
            sanitize_name(name)
