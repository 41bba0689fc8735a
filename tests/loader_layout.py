"""Shared helpers that lay out a simulated loader directory tree on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from whereis.adapters.environment import StaticEnvironment
from whereis.adapters.filesystem import LocalFileSystem
from whereis.adapters.registry import SnapshotConfigurationStore
from whereis.resolution.resolver import WhereisResolver
from whereis.telemetry.logger import ProbeLogger


@dataclass
class LoaderLayout:
    """Directories standing in for each search-order slot under one temp root."""

    root: Path
    executable_dir: Path
    working_dir: Path
    system_dir: Path
    legacy_dir: Path
    windows_dir: Path
    known_dlls_dir: Path
    path_dirs: list[Path] = field(default_factory=list)

    @classmethod
    def create(cls, root: Path, path_dir_count: int = 2) -> LoaderLayout:
        """Create every slot directory under `root`."""

        windows_dir = root / "Windows"
        layout = cls(
            root=root,
            executable_dir=root / "app",
            working_dir=root / "cwd",
            system_dir=windows_dir / "System32",
            legacy_dir=windows_dir / "System",
            windows_dir=windows_dir,
            known_dlls_dir=windows_dir / "KnownDlls",
            path_dirs=[root / f"path{index}" for index in range(1, path_dir_count + 1)],
        )
        for directory in (
            layout.executable_dir,
            layout.working_dir,
            layout.system_dir,
            layout.legacy_dir,
            layout.windows_dir,
            layout.known_dlls_dir,
            *layout.path_dirs,
        ):
            directory.mkdir(parents=True, exist_ok=True)
        return layout

    def place(self, directory: Path, name: str) -> str:
        """Create an empty file in `directory` and return its path string."""

        target = directory / name
        target.write_bytes(b"MZ")
        return str(target)

    def environment(
        self,
        host_64bit: bool = True,
        safe_search_supported: bool = True,
        machine_path: str | None = None,
    ) -> StaticEnvironment:
        """Describe this layout as a static environment."""

        path_value = machine_path
        if path_value is None:
            path_value = ";".join(str(directory) for directory in self.path_dirs)
        return StaticEnvironment(
            variables={"SystemRoot": str(self.windows_dir)},
            machine_variables={"PATH": path_value},
            host_64bit=host_64bit,
            system_directory=str(self.system_dir),
            windows_directory=str(self.windows_dir),
            executable_directory=str(self.executable_dir),
            safe_search_supported=safe_search_supported,
        )

    def resolver(
        self,
        registry: Mapping[str, Mapping[str, object]] | None = None,
        safe_search: bool | None = None,
        host_64bit: bool = True,
        environment: StaticEnvironment | None = None,
        logger: ProbeLogger | None = None,
    ) -> WhereisResolver:
        """Build a resolver over this layout with an in-memory registry."""

        return WhereisResolver(
            configuration_store=SnapshotConfigurationStore(keys=registry or {}),
            environment=environment or self.environment(host_64bit=host_64bit),
            filesystem=LocalFileSystem(),
            logger=logger,
            safe_search=safe_search,
            legacy_system_directory=str(self.legacy_dir),
        )
