"""Search-order construction and directory probing.

Responsibilities:
- Decide whether safe search mode is active.
- Assemble the ordered directory list the loader would probe.
- Probe each directory for a filename, skipping missing or unreadable ones.

Key functions:
- `is_safe_search_enabled`: safe search mode and the source that decided it.
- `build_search_order`: ordered `SearchOrder` for one request.
- `probe_search_order`: existing matches in directory order.
"""

from __future__ import annotations

from ..adapters.environment import EnvironmentAccess, VariableScope
from ..adapters.filesystem import FileSystemAccess
from ..adapters.registry import ConfigurationStore
from ..models.datatypes import SearchDirectory, SearchOrder, SearchSource
from ..parsing import normalize_optional_string, parse_registry_flag
from ..telemetry.logger import ProbeLogger


SESSION_MANAGER_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager"
SAFE_SEARCH_VALUE = "SafeDllSearchMode"
LEGACY_SYSTEM_DIRECTORY = r"C:\Windows\System"
PATH_VARIABLE = "PATH"


def is_safe_search_enabled(
    store: ConfigurationStore,
    environment: EnvironmentAccess,
    override: bool | None = None,
) -> tuple[bool, str]:
    """Return the safe search mode and a label for the source that decided it.

    Precedence: explicit override, then platform support (platforms without
    safe search are always unsafe), then the configured flag. A missing or
    unreadable flag means enabled, the platform default.
    """

    if override is not None:
        return override, "override"
    if not environment.supports_safe_search():
        return False, "platform"

    configured = parse_registry_flag(store.get_string(SESSION_MANAGER_KEY, SAFE_SEARCH_VALUE))
    if configured is None:
        return True, "default"
    return configured, "configuration"


def machine_path_directories(environment: EnvironmentAccess) -> list[str]:
    """Split the machine-scope `PATH` into entries, dropping blank ones."""

    raw_path = environment.get_variable(PATH_VARIABLE, VariableScope.MACHINE)
    if raw_path is None:
        return []
    entries = [
        normalize_optional_string(entry)
        for entry in raw_path.split(environment.path_separator)
    ]
    return [entry for entry in entries if entry is not None]


def build_search_order(
    store: ConfigurationStore,
    environment: EnvironmentAccess,
    filesystem: FileSystemAccess,
    working_directory: str | None = None,
    executable_directory: str | None = None,
    safe_search: bool | None = None,
    legacy_system_directory: str = LEGACY_SYSTEM_DIRECTORY,
    logger: ProbeLogger | None = None,
) -> SearchOrder:
    """Assemble the ordered directories probed for one filename.

    The working directory appears exactly once: right after the executable
    directory when safe search is off, after the Windows directory when on.
    """

    enabled, source = is_safe_search_enabled(store, environment, safe_search)
    if logger is not None:
        logger.log_safe_search(enabled, source)

    resolved_working_directory = (
        working_directory
        if working_directory is not None
        else filesystem.get_current_working_directory()
    )
    resolved_executable_directory = (
        executable_directory
        if executable_directory is not None
        else environment.get_executable_directory()
    )
    working = SearchDirectory(resolved_working_directory, SearchSource.WORKING)

    directories: list[SearchDirectory] = [
        SearchDirectory(resolved_executable_directory, SearchSource.EXECUTABLE)
    ]
    if not enabled:
        directories.append(working)
    directories.append(SearchDirectory(environment.get_system_directory(), SearchSource.SYSTEM))
    directories.append(SearchDirectory(legacy_system_directory, SearchSource.LEGACY_SYSTEM))
    directories.append(SearchDirectory(environment.get_windows_directory(), SearchSource.WINDOWS))
    if enabled:
        directories.append(working)
    directories.extend(
        SearchDirectory(entry, SearchSource.PATH) for entry in machine_path_directories(environment)
    )

    order = SearchOrder(directories=tuple(directories), safe_search=enabled)
    if logger is not None:
        logger.log_search_order(len(order), enabled)
    return order


def probe_directory(
    directory: SearchDirectory,
    filename: str,
    environment: EnvironmentAccess,
    filesystem: FileSystemAccess,
    logger: ProbeLogger | None = None,
) -> str | None:
    """Return the joined path when `filename` exists in `directory`.

    Missing directories yield `None`. An `OSError` while probing is logged and
    also yields `None`.
    """

    try:
        expanded = environment.expand_variables(directory.path)
        if not filesystem.directory_exists(expanded):
            return None
        candidate = filesystem.combine_path(expanded, filename)
        if not filesystem.file_exists(candidate):
            return None
    except OSError as exc:
        if logger is not None:
            logger.log_degraded(
                "probe",
                type(exc).__name__,
                directory=directory.path,
                source=directory.source.value,
            )
        return None

    if logger is not None:
        logger.log_hit(filename, candidate, directory.source.value)
    return candidate


def probe_search_order(
    order: SearchOrder,
    filename: str,
    environment: EnvironmentAccess,
    filesystem: FileSystemAccess,
    logger: ProbeLogger | None = None,
) -> list[tuple[SearchDirectory, str]]:
    """Probe every directory in order and return each directory with its match."""

    matches: list[tuple[SearchDirectory, str]] = []
    for directory in order:
        path = probe_directory(directory, filename, environment, filesystem, logger)
        if path is not None:
            matches.append((directory, path))
    return matches
