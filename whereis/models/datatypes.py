"""Core datatypes shared across whereis modules.

Responsibilities:
- Represent the immutable records produced while replaying a search order.
- Provide explicit typing for resolution results and their provenance.

Key types:
- `Architecture`, `SearchSource`, `SearchDirectory`, `SearchOrder`,
  `KnownModuleIndex`, and `ResolutionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping


class Architecture(str, Enum):
    """Target architecture of the module being resolved."""

    X86 = "x86"
    X64 = "x64"


class SearchSource(str, Enum):
    """Origin of one probed directory in the search order."""

    KNOWN_MODULES = "known-modules"
    EXECUTABLE = "executable"
    WORKING = "working"
    SYSTEM = "system"
    LEGACY_SYSTEM = "legacy-system"
    WINDOWS = "windows"
    PATH = "path"


@dataclass(frozen=True, slots=True)
class SearchDirectory:
    """One directory to probe, tagged with where it came from.

    Attributes:
        path: Directory path as configured, possibly with `%VAR%` references.
        source: Search-order slot that contributed this directory.
    """

    path: str
    source: SearchSource


@dataclass(frozen=True, slots=True)
class SearchOrder:
    """Ordered directories probed for a filename.

    Attributes:
        directories: Directories in precedence order. Duplicates are kept.
        safe_search: Whether safe search mode placed the working directory
            after the system directories.
    """

    directories: tuple[SearchDirectory, ...]
    safe_search: bool

    def __iter__(self) -> Iterator[SearchDirectory]:
        return iter(self.directories)

    def __len__(self) -> int:
        return len(self.directories)

    def paths(self) -> list[str]:
        """Return the raw directory paths in probe order."""

        return [directory.path for directory in self.directories]


@dataclass(frozen=True, slots=True)
class KnownModuleIndex:
    """Known modules resolved through a fixed redirect directory.

    Attributes:
        directory: Redirect directory for the requested architecture, or
            `None` when the system exposes no usable directory.
        modules: Module filename to redirect directory mapping.
    """

    directory: str | None = None
    modules: Mapping[str, str] = field(default_factory=dict)

    def __contains__(self, filename: object) -> bool:
        return filename in self.modules

    def __len__(self) -> int:
        return len(self.modules)

    def directory_for(self, filename: str) -> str | None:
        """Return the redirect directory for an exact module filename."""

        return self.modules.get(filename)


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Absolute paths found for one request, in discovery order.

    Attributes:
        paths: Existing absolute paths. May be empty.
    """

    paths: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __getitem__(self, index: int) -> str:
        return self.paths[index]

    @property
    def first(self) -> str | None:
        """Return the path the loader would pick, or `None` when nothing matched."""

        if not self.paths:
            return None
        return self.paths[0]

    def extend(self, other: ResolutionResult) -> ResolutionResult:
        """Return a new result with `other` appended after this one."""

        return ResolutionResult(paths=self.paths + other.paths)
