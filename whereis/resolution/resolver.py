"""Name resolution over the loader search order.

Responsibilities:
- Resolve an exact filename: known-module redirect first, then the general
  search order.
- Resolve a bare command by expanding it into executable candidates.
- Offer single-result variants and an explanation of where each hit came from.

Key types:
- `WhereisResolver`: resolver bound to configuration, environment and
  filesystem adapters.
- `create_resolver`: resolver wired to the live system adapters.
"""

from __future__ import annotations

from ..adapters.environment import EnvironmentAccess, create_environment
from ..adapters.filesystem import FileSystemAccess, LocalFileSystem
from ..adapters.registry import ConfigurationStore, create_configuration_store
from ..errors import InvalidArgumentError
from ..models.datatypes import (
    Architecture,
    KnownModuleIndex,
    ResolutionResult,
    SearchDirectory,
    SearchOrder,
    SearchSource,
)
from ..telemetry.logger import ProbeLogger
from .candidates import candidate_names
from .known_modules import load_known_module_index
from .search_order import (
    LEGACY_SYSTEM_DIRECTORY,
    build_search_order,
    probe_directory,
    probe_search_order,
)


def host_architecture(environment: EnvironmentAccess) -> Architecture:
    """Return the architecture matching the host bitness."""

    return Architecture.X64 if environment.is_64bit_host() else Architecture.X86


def _require_name(name: object) -> str:
    """Validate a target name, raising `InvalidArgumentError` when blank."""

    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError("A non-empty command or filename is required.")
    return name


class WhereisResolver:
    """Replay the loader search order for files and commands.

    All state is read fresh on every call; instances hold only the adapters
    and are safe to share between threads.
    """

    def __init__(
        self,
        configuration_store: ConfigurationStore,
        environment: EnvironmentAccess,
        filesystem: FileSystemAccess,
        logger: ProbeLogger | None = None,
        safe_search: bool | None = None,
        legacy_system_directory: str = LEGACY_SYSTEM_DIRECTORY,
    ) -> None:
        """Bind the resolver to its adapters.

        Args:
            configuration_store: Source of known-module and safe search settings.
            environment: Environment variables and host directories.
            filesystem: Existence checks and path joins.
            logger: Optional structured logger for probe events.
            safe_search: Forces safe search on or off instead of reading it.
            legacy_system_directory: Fixed legacy system directory slot.
        """

        self._store = configuration_store
        self._environment = environment
        self._filesystem = filesystem
        self._logger = logger
        self._safe_search = safe_search
        self._legacy_system_directory = legacy_system_directory

    def _architecture(self, architecture: Architecture | None) -> Architecture:
        if architecture is None:
            return host_architecture(self._environment)
        return architecture

    def search_order(
        self,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> SearchOrder:
        """Return the general search order a resolution would probe."""

        return build_search_order(
            self._store,
            self._environment,
            self._filesystem,
            working_directory=working_directory,
            executable_directory=executable_directory,
            safe_search=self._safe_search,
            legacy_system_directory=self._legacy_system_directory,
            logger=self._logger,
        )

    def known_modules(self, architecture: Architecture | None = None) -> KnownModuleIndex:
        """Return the known-module index for the target architecture."""

        index = load_known_module_index(
            self._store, self._environment, self._architecture(architecture)
        )
        if self._logger is not None:
            self._logger.log_known_modules(len(index), index.directory)
        return index

    def explain_file(
        self,
        name: str,
        architecture: Architecture | None = None,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> list[tuple[SearchDirectory, str]]:
        """Resolve an exact filename and keep the directory behind each hit."""

        filename = _require_name(name)

        matches: list[tuple[SearchDirectory, str]] = []
        index = self.known_modules(architecture)
        known_directory = index.directory_for(filename)
        if known_directory is not None:
            directory = SearchDirectory(known_directory, SearchSource.KNOWN_MODULES)
            path = probe_directory(
                directory, filename, self._environment, self._filesystem, self._logger
            )
            if path is not None:
                matches.append((directory, path))

        order = self.search_order(working_directory, executable_directory)
        matches.extend(
            probe_search_order(order, filename, self._environment, self._filesystem, self._logger)
        )
        return matches

    def resolve_file(
        self,
        name: str,
        architecture: Architecture | None = None,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> ResolutionResult:
        """Return every location of an exact filename in load order."""

        matches = self.explain_file(name, architecture, working_directory, executable_directory)
        return ResolutionResult(paths=tuple(path for _directory, path in matches))

    def resolve_command(
        self,
        name: str,
        architecture: Architecture | None = None,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> ResolutionResult:
        """Return every location of a command, trying executable extensions in order.

        Hits are grouped by candidate name first, then by directory order.
        """

        result = ResolutionResult()
        for candidate in candidate_names(_require_name(name)):
            result = result.extend(
                self.resolve_file(candidate, architecture, working_directory, executable_directory)
            )
        return result

    def explain_command(
        self,
        name: str,
        architecture: Architecture | None = None,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> list[tuple[SearchDirectory, str]]:
        """Resolve a command like `resolve_command`, keeping the directory behind each hit."""

        matches: list[tuple[SearchDirectory, str]] = []
        for candidate in candidate_names(_require_name(name)):
            matches.extend(
                self.explain_file(candidate, architecture, working_directory, executable_directory)
            )
        return matches

    def find_file(
        self,
        name: str,
        architecture: Architecture | None = None,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> str | None:
        """Return the first location of an exact filename, or `None`."""

        return self.resolve_file(name, architecture, working_directory, executable_directory).first

    def find_command(
        self,
        name: str,
        architecture: Architecture | None = None,
        working_directory: str | None = None,
        executable_directory: str | None = None,
    ) -> str | None:
        """Return the first location of a command, or `None`."""

        return self.resolve_command(
            name, architecture, working_directory, executable_directory
        ).first


def create_resolver(
    configuration_store: ConfigurationStore | None = None,
    logger: ProbeLogger | None = None,
    safe_search: bool | None = None,
) -> WhereisResolver:
    """Create a resolver wired to the live registry, environment and filesystem.

    A custom configuration store (for example a registry snapshot) replaces
    the live registry for every lookup, including machine-scope variables.
    """

    store = configuration_store
    if store is None:
        store = create_configuration_store()
    return WhereisResolver(
        configuration_store=store,
        environment=create_environment(store),
        filesystem=LocalFileSystem(),
        logger=logger,
        safe_search=safe_search,
    )


def resolve_file(
    name: str,
    architecture: Architecture | None = None,
    working_directory: str | None = None,
    executable_directory: str | None = None,
) -> ResolutionResult:
    """Resolve an exact filename against the live system."""

    return create_resolver().resolve_file(
        name, architecture, working_directory, executable_directory
    )


def resolve_command(
    name: str,
    architecture: Architecture | None = None,
    working_directory: str | None = None,
    executable_directory: str | None = None,
) -> ResolutionResult:
    """Resolve a command against the live system."""

    return create_resolver().resolve_command(
        name, architecture, working_directory, executable_directory
    )


def find_file(
    name: str,
    architecture: Architecture | None = None,
    working_directory: str | None = None,
    executable_directory: str | None = None,
) -> str | None:
    """Return the first location of an exact filename on the live system."""

    return create_resolver().find_file(name, architecture, working_directory, executable_directory)


def find_command(
    name: str,
    architecture: Architecture | None = None,
    working_directory: str | None = None,
    executable_directory: str | None = None,
) -> str | None:
    """Return the first location of a command on the live system."""

    return create_resolver().find_command(
        name, architecture, working_directory, executable_directory
    )
