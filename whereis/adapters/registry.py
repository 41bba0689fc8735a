"""Configuration store adapters for registry-backed loader settings.

Responsibilities:
- Read loader configuration values (known modules, safe search mode) from the
  Windows registry.
- Provide an in-memory snapshot store for offline resolution and tests.
- Degrade to "no data" instead of raising when keys or values are missing.

Key types:
- `ConfigurationStore`: interface for key/value configuration lookups.
- `WindowsRegistryStore`: `winreg`-backed store rooted at `HKEY_LOCAL_MACHINE`.
- `SnapshotConfigurationStore`: mapping-backed store, loadable from YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..parsing import normalize_optional_string


def normalize_key_path(path: str) -> str:
    """Collapse a backslash-separated key path, dropping blank segments."""

    segments = [segment.strip() for segment in path.replace("/", "\\").split("\\")]
    return "\\".join(segment for segment in segments if segment)


def _stringify_value(value: object) -> str | None:
    """Convert a raw registry value into the string form exposed by stores."""

    if value is None or isinstance(value, (bytes, bytearray)):
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple)):
        return ";".join(str(item) for item in value)
    return str(value)


class ConfigurationStore:
    """Interface for hierarchical key/value configuration lookups."""

    def get_string(self, path: str, value_name: str) -> str | None:
        """Return one value under `path` as a string, or `None` when absent."""

        raise NotImplementedError

    def list_value_names(self, path: str) -> list[str]:
        """Return the value names stored directly under `path`."""

        raise NotImplementedError


@dataclass(slots=True)
class WindowsRegistryStore(ConfigurationStore):
    """Configuration store backed by the live Windows registry.

    Paths are relative to `HKEY_LOCAL_MACHINE` and always read through the
    64-bit registry view. On hosts without `winreg` every lookup is empty.
    """

    use_64bit_view: bool = True

    def _load_winreg_module(self):
        """Import and return `winreg` when running on Windows."""

        try:
            import winreg  # type: ignore
        except ImportError:
            return None
        return winreg

    def is_available(self) -> bool:
        """Return `True` when the registry can be read on this host."""

        return self._load_winreg_module() is not None

    def _open_key(self, winreg_module, path: str):  # type: ignore[no-untyped-def]
        """Open a read-only key handle, or return `None` when it does not exist."""

        access = winreg_module.KEY_READ
        if self.use_64bit_view:
            access |= winreg_module.KEY_WOW64_64KEY
        try:
            return winreg_module.OpenKey(
                winreg_module.HKEY_LOCAL_MACHINE,
                normalize_key_path(path),
                0,
                access,
            )
        except OSError:
            return None

    def get_string(self, path: str, value_name: str) -> str | None:
        """Read a registry value, returning `None` for missing keys or values."""

        winreg_module = self._load_winreg_module()
        if winreg_module is None:
            return None

        key = self._open_key(winreg_module, path)
        if key is None:
            return None
        with key:
            try:
                value, _value_type = winreg_module.QueryValueEx(key, value_name)
            except OSError:
                return None
        return _stringify_value(value)

    def list_value_names(self, path: str) -> list[str]:
        """Enumerate value names under a registry key, empty when the key is missing."""

        winreg_module = self._load_winreg_module()
        if winreg_module is None:
            return []

        key = self._open_key(winreg_module, path)
        if key is None:
            return []

        names: list[str] = []
        with key:
            index = 0
            while True:
                try:
                    name, _value, _value_type = winreg_module.EnumValue(key, index)
                except OSError:
                    break
                names.append(name)
                index += 1
        return names


@dataclass(slots=True)
class SnapshotConfigurationStore(ConfigurationStore):
    """In-memory configuration store built from a key path to values mapping.

    Key paths and value names are matched case-insensitively, like the
    registry. Value names keep their original spelling when listed.
    """

    keys: Mapping[str, Mapping[str, object]] = field(default_factory=dict)
    _index: dict[str, dict[str, tuple[str, object]]] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        """Build the case-insensitive lookup index."""

        for path, values in self.keys.items():
            bucket = self._index.setdefault(normalize_key_path(path).lower(), {})
            for name, value in values.items():
                bucket[str(name).lower()] = (str(name), value)

    def get_string(self, path: str, value_name: str) -> str | None:
        """Return a snapshot value as a string, or `None` when absent."""

        bucket = self._index.get(normalize_key_path(path).lower())
        if bucket is None:
            return None
        entry = bucket.get(value_name.lower())
        if entry is None:
            return None
        return _stringify_value(entry[1])

    def list_value_names(self, path: str) -> list[str]:
        """Return value names under a snapshot key in insertion order."""

        bucket = self._index.get(normalize_key_path(path).lower())
        if bucket is None:
            return []
        return [name for name, _value in bucket.values()]

    @staticmethod
    def from_yaml(path: Path) -> SnapshotConfigurationStore:
        """Load a registry snapshot from a YAML mapping of key paths to values."""

        raw_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(raw_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"Registry snapshot `{path}` must contain a top-level mapping.")

        keys: dict[str, dict[str, Any]] = {}
        for key_path, values in payload.items():
            normalized_path = normalize_optional_string(key_path)
            if normalized_path is None:
                raise ValueError(f"Registry snapshot `{path}` contains a blank key path.")
            if values is None:
                values = {}
            if not isinstance(values, Mapping):
                raise ValueError(
                    f"Registry snapshot `{path}` key `{normalized_path}` must map value "
                    "names to values."
                )
            keys[normalized_path] = {str(name): value for name, value in values.items()}
        return SnapshotConfigurationStore(keys=keys)


def create_configuration_store() -> ConfigurationStore:
    """Create the default live configuration store implementation."""

    return WindowsRegistryStore()
