"""Capability adapters for the registry, environment and filesystem.

The resolver only talks to the interfaces defined here, so live system access
can be swapped for snapshots in offline runs and tests.
"""

from .environment import (
    EnvironmentAccess,
    StaticEnvironment,
    SystemEnvironment,
    VariableScope,
    create_environment,
)
from .filesystem import FileSystemAccess, LocalFileSystem
from .registry import (
    ConfigurationStore,
    SnapshotConfigurationStore,
    WindowsRegistryStore,
    create_configuration_store,
)

__all__ = [
    "ConfigurationStore",
    "EnvironmentAccess",
    "FileSystemAccess",
    "LocalFileSystem",
    "SnapshotConfigurationStore",
    "StaticEnvironment",
    "SystemEnvironment",
    "VariableScope",
    "WindowsRegistryStore",
    "create_configuration_store",
    "create_environment",
]
