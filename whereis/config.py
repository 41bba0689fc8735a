"""Configuration model and loaders for whereis.

Responsibilities:
- Define runtime settings for a resolution run as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Resolve effective settings with deterministic source precedence.

Key types:
- `WhereisConfig`: normalized settings for one CLI invocation.
- `ConfigLoader`: static construction helpers for `WhereisConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models.datatypes import Architecture
from .parsing import (
    normalize_optional_string,
    parse_architecture_token,
    parse_permissive_boolean,
    parse_required_boolean,
)


@dataclass(frozen=True, slots=True)
class WhereisConfig:
    """Settings for one resolution run. `None` means "use the computed default".

    Attributes:
        architecture: Target architecture; host architecture when unset.
        working_directory: Working directory override.
        executable_directory: Executable directory override.
        safe_search: Forces safe search mode instead of reading the registry.
        registry_snapshot: YAML registry snapshot used instead of the live registry.
    """

    architecture: Architecture | None = None
    working_directory: Path | None = None
    executable_directory: Path | None = None
    safe_search: bool | None = None
    registry_snapshot: Path | None = None

    def overridden_by(self, other: WhereisConfig) -> WhereisConfig:
        """Return a config where every value set in `other` wins over this one."""

        return WhereisConfig(
            architecture=_first_set(other.architecture, self.architecture),
            working_directory=_first_set(other.working_directory, self.working_directory),
            executable_directory=_first_set(
                other.executable_directory, self.executable_directory
            ),
            safe_search=_first_set(other.safe_search, self.safe_search),
            registry_snapshot=_first_set(other.registry_snapshot, self.registry_snapshot),
        )


def _first_set(preferred: Any, fallback: Any) -> Any:
    """Return `preferred` unless it is `None`."""

    return fallback if preferred is None else preferred


def resolve_effective_config(
    cli: WhereisConfig,
    env: WhereisConfig | None = None,
    file: WhereisConfig | None = None,
) -> WhereisConfig:
    """Merge settings with precedence `cli` > `env` > `file` > defaults."""

    effective = file if file is not None else WhereisConfig()
    if env is not None:
        effective = effective.overridden_by(env)
    return effective.overridden_by(cli)


class ConfigLoader:
    """Factory methods for creating `WhereisConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "architecture",
            "working_directory",
            "executable_directory",
            "safe_search",
            "registry_snapshot",
        }
    )
    ENV_ARCHITECTURE = "WHEREIS_ARCH"
    ENV_WORKING_DIRECTORY = "WHEREIS_WORKING_DIR"
    ENV_EXECUTABLE_DIRECTORY = "WHEREIS_EXECUTABLE_DIR"
    ENV_SAFE_SEARCH = "WHEREIS_SAFE_SEARCH"
    ENV_REGISTRY_SNAPSHOT = "WHEREIS_REGISTRY_SNAPSHOT"

    @staticmethod
    def from_yaml(path: Path) -> WhereisConfig:
        """Create a validated config from a YAML file.

        Relative paths inside the file are resolved against the file's directory.
        """

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        return ConfigLoader._build_config_from_mapping(
            payload,
            source_label=f"YAML `{path}`",
            base_dir=path.parent,
        )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> WhereisConfig:
        """Create a validated config from `WHEREIS_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        architecture_token = normalize_optional_string(
            env_map.get(ConfigLoader.ENV_ARCHITECTURE)
        )
        architecture = None
        if architecture_token is not None:
            architecture = parse_architecture_token(architecture_token)
            if architecture is None:
                raise ValueError(
                    f"`{ConfigLoader.ENV_ARCHITECTURE}` must be `x86` or `x64`, "
                    f"got `{architecture_token}`."
                )

        safe_search_token = normalize_optional_string(env_map.get(ConfigLoader.ENV_SAFE_SEARCH))
        safe_search = None
        if safe_search_token is not None:
            safe_search = parse_required_boolean(safe_search_token, ConfigLoader.ENV_SAFE_SEARCH)

        return WhereisConfig(
            architecture=architecture,
            working_directory=ConfigLoader._optional_env_path(
                env_map, ConfigLoader.ENV_WORKING_DIRECTORY
            ),
            executable_directory=ConfigLoader._optional_env_path(
                env_map, ConfigLoader.ENV_EXECUTABLE_DIRECTORY
            ),
            safe_search=safe_search,
            registry_snapshot=ConfigLoader._optional_env_path(
                env_map, ConfigLoader.ENV_REGISTRY_SNAPSHOT
            ),
        )

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        payload = yaml.safe_load(raw_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any],
        source_label: str,
        base_dir: Path,
    ) -> WhereisConfig:
        """Build a validated config from a mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        architecture = None
        architecture_token = normalize_optional_string(payload.get("architecture"))
        if architecture_token is not None:
            architecture = parse_architecture_token(architecture_token)
            if architecture is None:
                raise ValueError(
                    f"{source_label} `architecture` must be `x86` or `x64`, "
                    f"got `{architecture_token}`."
                )

        safe_search = None
        if payload.get("safe_search") is not None:
            safe_search = parse_permissive_boolean(payload["safe_search"])
            if safe_search is None:
                raise ValueError(f"{source_label} `safe_search` must be a boolean value.")

        return WhereisConfig(
            architecture=architecture,
            working_directory=ConfigLoader._optional_path(
                payload, "working_directory", base_dir
            ),
            executable_directory=ConfigLoader._optional_path(
                payload, "executable_directory", base_dir
            ),
            safe_search=safe_search,
            registry_snapshot=ConfigLoader._optional_path(payload, "registry_snapshot", base_dir),
        )

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str, base_dir: Path) -> Path | None:
        """Read an optional path field, anchoring relative values at `base_dir`."""

        value = normalize_optional_string(payload.get(key))
        if value is None:
            return None
        path = Path(value)
        if path.is_absolute():
            return path
        return base_dir / path

    @staticmethod
    def _optional_env_path(env_map: Mapping[str, str], key: str) -> Path | None:
        """Read an optional path from environment variables."""

        value = normalize_optional_string(env_map.get(key))
        if value is None:
            return None
        return Path(value)
