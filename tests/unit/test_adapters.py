"""Unit tests for registry, environment and filesystem adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from whereis.adapters.environment import (
    StaticEnvironment,
    SystemEnvironment,
    VariableScope,
    expand_percent_variables,
)
from whereis.adapters.filesystem import LocalFileSystem
from whereis.adapters.registry import (
    SnapshotConfigurationStore,
    WindowsRegistryStore,
    normalize_key_path,
)


def test_normalize_key_path_drops_blank_segments() -> None:
    """Key paths should collapse duplicate and trailing separators."""

    assert normalize_key_path("\\SYSTEM\\\\Control\\") == "SYSTEM\\Control"
    assert normalize_key_path("SYSTEM/Control") == "SYSTEM\\Control"


def test_snapshot_store_matches_keys_and_value_names_case_insensitively() -> None:
    """Snapshot lookups should behave like registry lookups."""

    store = SnapshotConfigurationStore(
        keys={"SYSTEM\\Control\\KnownDLLs": {"Kernel32": "kernel32.dll", "Flag": 1}}
    )

    assert store.get_string("system\\control\\knowndlls", "KERNEL32") == "kernel32.dll"
    assert store.get_string("SYSTEM\\Control\\KnownDLLs", "Flag") == "1"
    assert store.list_value_names("SYSTEM\\CONTROL\\KNOWNDLLS") == ["Kernel32", "Flag"]


def test_snapshot_store_returns_nothing_for_missing_data() -> None:
    """Missing keys and values should be empty results, never errors."""

    store = SnapshotConfigurationStore(keys={"A": {"present": "x"}})

    assert store.get_string("B", "present") is None
    assert store.get_string("A", "absent") is None
    assert store.list_value_names("B") == []


def test_snapshot_store_from_yaml_loads_key_mapping(tmp_path: Path) -> None:
    """YAML snapshots should map key paths to value-name mappings."""

    snapshot_path = tmp_path / "registry.yml"
    snapshot_path.write_text(
        """
'SYSTEM\\CurrentControlSet\\Control\\Session Manager':
  SafeDllSearchMode: 0
'SYSTEM\\CurrentControlSet\\Control\\Session Manager\\KnownDLLs':
  DllDirectory: '%SystemRoot%\\system32'
  kernel32: kernel32.dll
'SYSTEM\\CurrentControlSet\\Control\\Session Manager\\ExcludeFromKnownDlls':
""".strip(),
        encoding="utf-8",
    )

    store = SnapshotConfigurationStore.from_yaml(snapshot_path)

    session_manager = "SYSTEM\\CurrentControlSet\\Control\\Session Manager"
    assert store.get_string(session_manager, "SafeDllSearchMode") == "0"
    assert store.get_string(session_manager + "\\KnownDLLs", "DllDirectory") == (
        "%SystemRoot%\\system32"
    )
    assert store.list_value_names(session_manager + "\\ExcludeFromKnownDlls") == []


def test_snapshot_store_from_yaml_rejects_non_mapping_payloads(tmp_path: Path) -> None:
    """Snapshots must be mappings of mappings."""

    list_root = tmp_path / "list.yml"
    list_root.write_text("- a\n- b\n", encoding="utf-8")
    scalar_values = tmp_path / "scalar.yml"
    scalar_values.write_text("KEY: value\n", encoding="utf-8")

    with pytest.raises(ValueError, match="top-level mapping"):
        SnapshotConfigurationStore.from_yaml(list_root)
    with pytest.raises(ValueError, match="must map value names"):
        SnapshotConfigurationStore.from_yaml(scalar_values)


def test_windows_registry_store_is_empty_without_winreg() -> None:
    """The live registry store should degrade to empty when `winreg` is unavailable."""

    store = WindowsRegistryStore()
    store._load_winreg_module = lambda: None  # type: ignore[method-assign]

    assert store.is_available() is False
    assert store.get_string("SYSTEM", "anything") is None
    assert store.list_value_names("SYSTEM") == []


def test_expand_percent_variables_is_case_insensitive_and_keeps_unknowns() -> None:
    """Known references expand regardless of case; unknown ones stay verbatim."""

    expanded = expand_percent_variables(
        r"%systemroot%\System32;%MISSING%\bin", {"SystemRoot": r"C:\Windows"}
    )

    assert expanded == r"C:\Windows\System32;%MISSING%\bin"


def test_static_environment_reads_scoped_variables() -> None:
    """Each scope should read from its own mapping."""

    environment = StaticEnvironment(
        variables={"PATH": "process"},
        machine_variables={"Path": "machine"},
        user_variables={"PATH": "user"},
    )

    assert environment.get_variable("path", VariableScope.PROCESS) == "process"
    assert environment.get_variable("PATH", VariableScope.MACHINE) == "machine"
    assert environment.get_variable("PATH", VariableScope.USER) == "user"
    assert environment.get_variable("OTHER", VariableScope.MACHINE) is None


def test_system_environment_reads_windows_directory_from_system_root(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Windows and system directories should follow `%SystemRoot%`."""

    monkeypatch.setenv("SystemRoot", r"D:\Win")

    environment = SystemEnvironment()

    assert environment.get_windows_directory() == r"D:\Win"
    assert environment.get_system_directory() == r"D:\Win\System32"


def test_system_environment_expands_percent_references(monkeypatch: pytest.MonkeyPatch) -> None:
    """Live expansion should understand `%VAR%` references on every host."""

    monkeypatch.setenv("WHEREIS_TEST_ROOT", "root-dir")

    assert SystemEnvironment().expand_variables("%WHEREIS_TEST_ROOT%/bin") == "root-dir/bin"


def test_local_file_system_probes_directories_and_files(tmp_path: Path) -> None:
    """The local filesystem adapter should distinguish files and directories."""

    filesystem = LocalFileSystem()
    target = tmp_path / "module.dll"
    target.write_bytes(b"MZ")

    assert filesystem.directory_exists(str(tmp_path)) is True
    assert filesystem.directory_exists("") is False
    assert filesystem.file_exists(str(target)) is True
    assert filesystem.file_exists(str(tmp_path)) is False
    assert filesystem.combine_path(str(tmp_path), "module.dll") == str(target)
