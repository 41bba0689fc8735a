"""Known-module index derived from loader configuration.

Responsibilities:
- Read the known-module listing and its exclusion overlay.
- Pick the redirect directory for the host bitness and target architecture.
- Degrade to an empty index whenever configuration data is missing.
"""

from __future__ import annotations

from ..adapters.environment import EnvironmentAccess
from ..adapters.registry import ConfigurationStore
from ..models.datatypes import Architecture, KnownModuleIndex
from ..parsing import normalize_optional_string


KNOWN_MODULES_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\KnownDLLs"
EXCLUDED_KNOWN_MODULES_KEY = (
    r"SYSTEM\CurrentControlSet\Control\Session Manager\ExcludeFromKnownDlls"
)
DIRECTORY_MARKER = "DllDirectory"
DIRECTORY_MARKER_32 = "DllDirectory32"
RESERVED_MARKERS = frozenset({DIRECTORY_MARKER, DIRECTORY_MARKER_32})

# (host is 64-bit, target architecture) -> directory marker value name.
DIRECTORY_MARKER_BY_TARGET: dict[tuple[bool, Architecture], str] = {
    (True, Architecture.X64): DIRECTORY_MARKER,
    (True, Architecture.X86): DIRECTORY_MARKER_32,
    (False, Architecture.X64): DIRECTORY_MARKER_32,
    (False, Architecture.X86): DIRECTORY_MARKER_32,
}


def directory_marker_for(host_64bit: bool, architecture: Architecture) -> str:
    """Return the configuration value naming the redirect directory."""

    return DIRECTORY_MARKER_BY_TARGET[(host_64bit, architecture)]


def load_known_module_index(
    store: ConfigurationStore,
    environment: EnvironmentAccess,
    architecture: Architecture,
) -> KnownModuleIndex:
    """Build the known-module index for one resolution request.

    Entries listed under the exclusion key, by value name or by module
    filename, are dropped. The reserved directory markers are never modules.
    """

    value_names = store.list_value_names(KNOWN_MODULES_KEY)
    if not value_names:
        return KnownModuleIndex()

    marker = directory_marker_for(environment.is_64bit_host(), architecture)
    directory = normalize_optional_string(store.get_string(KNOWN_MODULES_KEY, marker))
    if directory is None:
        return KnownModuleIndex()

    excluded = set(store.list_value_names(EXCLUDED_KNOWN_MODULES_KEY))
    modules: dict[str, str] = {}
    for value_name in value_names:
        if value_name in RESERVED_MARKERS or value_name in excluded:
            continue
        module_name = normalize_optional_string(store.get_string(KNOWN_MODULES_KEY, value_name))
        if module_name is None or module_name in excluded:
            continue
        modules[module_name] = directory

    return KnownModuleIndex(directory=directory, modules=modules)
