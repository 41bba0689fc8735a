"""Unit tests for safe search detection, search-order assembly and probing."""

from __future__ import annotations

import pytest

from tests.loader_layout import LoaderLayout
from whereis.adapters.environment import StaticEnvironment
from whereis.adapters.filesystem import LocalFileSystem
from whereis.adapters.registry import SnapshotConfigurationStore
from whereis.models.datatypes import SearchDirectory, SearchSource
from whereis.resolution.search_order import (
    LEGACY_SYSTEM_DIRECTORY,
    SAFE_SEARCH_VALUE,
    SESSION_MANAGER_KEY,
    build_search_order,
    is_safe_search_enabled,
    machine_path_directories,
    probe_directory,
    probe_search_order,
)


def _safe_search_store(value: object) -> SnapshotConfigurationStore:
    return SnapshotConfigurationStore(keys={SESSION_MANAGER_KEY: {SAFE_SEARCH_VALUE: value}})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1, True),
        (0, False),
        ("0x0", False),
        ("yes", True),
        ("garbage", True),
    ],
)
def test_safe_search_reads_configured_flag(value: object, expected: bool) -> None:
    """Configured flags should be honored; unreadable values fall back to enabled."""

    enabled, _source = is_safe_search_enabled(_safe_search_store(value), StaticEnvironment())

    assert enabled is expected


def test_safe_search_defaults_to_enabled_when_flag_is_absent() -> None:
    """An absent flag means the platform default, which is enabled."""

    assert is_safe_search_enabled(SnapshotConfigurationStore(), StaticEnvironment()) == (
        True,
        "default",
    )


def test_safe_search_is_disabled_on_platforms_without_support() -> None:
    """Platforms predating safe search are always unsafe, whatever is configured."""

    environment = StaticEnvironment(safe_search_supported=False)

    assert is_safe_search_enabled(_safe_search_store(1), environment) == (False, "platform")


def test_safe_search_override_wins_over_configuration() -> None:
    """An explicit override should bypass platform and registry checks."""

    environment = StaticEnvironment(safe_search_supported=False)

    assert is_safe_search_enabled(_safe_search_store(0), environment, override=True) == (
        True,
        "override",
    )


def test_machine_path_directories_split_and_drop_blank_entries() -> None:
    """PATH entries should keep their order and skip blank segments."""

    environment = StaticEnvironment(machine_variables={"Path": r"C:\a;; C:\b ;%TOOLS%;"})

    assert machine_path_directories(environment) == [r"C:\a", r"C:\b", "%TOOLS%"]


def test_machine_path_directories_empty_when_variable_unset() -> None:
    """A missing machine PATH contributes no directories."""

    assert machine_path_directories(StaticEnvironment()) == []


def _sources(safe_search: bool) -> list[SearchSource]:
    environment = StaticEnvironment(
        machine_variables={"PATH": r"C:\tools;C:\bin"},
        executable_directory=r"C:\app",
    )
    order = build_search_order(
        SnapshotConfigurationStore(),
        environment,
        LocalFileSystem(),
        working_directory=r"C:\work",
        safe_search=safe_search,
    )
    assert order.safe_search is safe_search
    return [directory.source for directory in order]


def test_search_order_places_working_directory_after_windows_when_safe() -> None:
    """Safe search should place the working directory after the system directories."""

    assert _sources(safe_search=True) == [
        SearchSource.EXECUTABLE,
        SearchSource.SYSTEM,
        SearchSource.LEGACY_SYSTEM,
        SearchSource.WINDOWS,
        SearchSource.WORKING,
        SearchSource.PATH,
        SearchSource.PATH,
    ]


def test_search_order_places_working_directory_second_when_unsafe() -> None:
    """Unsafe search should probe the working directory right after the program directory."""

    assert _sources(safe_search=False) == [
        SearchSource.EXECUTABLE,
        SearchSource.WORKING,
        SearchSource.SYSTEM,
        SearchSource.LEGACY_SYSTEM,
        SearchSource.WINDOWS,
        SearchSource.PATH,
        SearchSource.PATH,
    ]


def test_search_order_uses_fixed_legacy_directory_and_environment_paths() -> None:
    """Directory slots should be filled from the environment and the legacy constant."""

    environment = StaticEnvironment(
        machine_variables={"PATH": r"C:\tools"},
        executable_directory=r"C:\app",
    )

    order = build_search_order(
        SnapshotConfigurationStore(),
        environment,
        LocalFileSystem(),
        working_directory=r"C:\work",
    )

    assert order.paths() == [
        r"C:\app",
        r"C:\Windows\System32",
        LEGACY_SYSTEM_DIRECTORY,
        r"C:\Windows",
        r"C:\work",
        r"C:\tools",
    ]


def test_probe_directory_expands_variables_before_checking(layout: LoaderLayout) -> None:
    """Directory paths with `%VAR%` references should be expanded before probing."""

    expected = layout.place(layout.system_dir, "expanded.dll")
    directory = SearchDirectory("%SystemRoot%/System32", SearchSource.PATH)

    path = probe_directory(directory, "expanded.dll", layout.environment(), LocalFileSystem())

    assert path == expected


def test_probe_search_order_skips_missing_directories(layout: LoaderLayout) -> None:
    """Directories that do not exist should be skipped without error."""

    expected = layout.place(layout.path_dirs[0], "present.dll")
    environment = layout.environment(
        machine_path=f"{layout.root / 'does-not-exist'};{layout.path_dirs[0]}"
    )
    order = build_search_order(
        SnapshotConfigurationStore(),
        environment,
        LocalFileSystem(),
        working_directory=str(layout.working_dir),
    )

    matches = probe_search_order(order, "present.dll", environment, LocalFileSystem())

    assert [path for _directory, path in matches] == [expected]


class _FlakyFileSystem(LocalFileSystem):
    """Filesystem that fails to probe one directory."""

    def __init__(self, broken_directory: str) -> None:
        self._broken_directory = broken_directory

    def directory_exists(self, path: str) -> bool:
        if path == self._broken_directory:
            raise PermissionError(path)
        return super().directory_exists(path)


def test_probe_search_order_continues_after_probe_failure(layout: LoaderLayout) -> None:
    """A directory that raises while probing should contribute nothing."""

    layout.place(layout.system_dir, "flaky.dll")
    expected = layout.place(layout.path_dirs[0], "flaky.dll")
    environment = layout.environment()
    filesystem = _FlakyFileSystem(str(layout.system_dir))
    order = build_search_order(
        SnapshotConfigurationStore(),
        environment,
        filesystem,
        working_directory=str(layout.working_dir),
    )

    matches = probe_search_order(order, "flaky.dll", environment, filesystem)

    assert [path for _directory, path in matches] == [expected]
