"""Environment access adapters for search-order construction.

Responsibilities:
- Expose environment variables by scope and `%VAR%` expansion.
- Report host facts the search order depends on (bitness, system and Windows
  directories, running program directory, safe search support).

Key types:
- `EnvironmentAccess`: interface consumed by the resolver.
- `SystemEnvironment`: live process and registry backed implementation.
- `StaticEnvironment`: fixed values for offline resolution and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import os
from pathlib import Path
import platform
import re
import sys
from typing import Mapping

from .registry import ConfigurationStore, WindowsRegistryStore


_PERCENT_VARIABLE_PATTERN = re.compile(r"%([^%]+)%")
_MACHINE_ENVIRONMENT_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
_DEFAULT_WINDOWS_DIRECTORY = r"C:\Windows"


class VariableScope(str, Enum):
    """Scope an environment variable is read from."""

    PROCESS = "process"
    USER = "user"
    MACHINE = "machine"


def expand_percent_variables(text: str, variables: Mapping[str, str]) -> str:
    """Expand `%NAME%` references case-insensitively.

    Unknown references are left verbatim, matching Windows behavior.
    """

    lowered = {key.lower(): value for key, value in variables.items()}

    def _replace(match: re.Match[str]) -> str:
        value = lowered.get(match.group(1).lower())
        if value is None:
            return match.group(0)
        return value

    return _PERCENT_VARIABLE_PATTERN.sub(_replace, text)


class EnvironmentAccess:
    """Interface for environment and host facts used by the resolver."""

    path_separator: str = ";"

    def get_variable(self, name: str, scope: VariableScope) -> str | None:
        """Return a variable value for the scope, or `None` when unset."""

        raise NotImplementedError

    def expand_variables(self, text: str) -> str:
        """Expand environment variable references in `text`."""

        raise NotImplementedError

    def is_64bit_host(self) -> bool:
        """Return whether the host operating system is 64-bit."""

        raise NotImplementedError

    def get_system_directory(self) -> str:
        """Return the system directory (for example `C:\\Windows\\System32`)."""

        raise NotImplementedError

    def get_windows_directory(self) -> str:
        """Return the Windows directory (for example `C:\\Windows`)."""

        raise NotImplementedError

    def get_executable_directory(self) -> str:
        """Return the directory holding the running program image."""

        raise NotImplementedError

    def supports_safe_search(self) -> bool:
        """Return whether the platform knows the safe search setting at all."""

        raise NotImplementedError


@dataclass(slots=True)
class SystemEnvironment(EnvironmentAccess):
    """Environment of the running process.

    User and machine scopes are read from the registry on Windows and fall
    back to the process environment elsewhere.
    """

    configuration_store: ConfigurationStore = field(default_factory=WindowsRegistryStore)
    path_separator: str = os.pathsep

    def get_variable(self, name: str, scope: VariableScope) -> str | None:
        """Read a variable from the process environment or the registry scope."""

        if scope is VariableScope.MACHINE and sys.platform == "win32":
            return self.configuration_store.get_string(_MACHINE_ENVIRONMENT_KEY, name)
        if scope is VariableScope.USER and sys.platform == "win32":
            return _read_user_variable(name)
        return os.environ.get(name)

    def expand_variables(self, text: str) -> str:
        """Expand `%VAR%` and, on POSIX hosts, `$VAR` references."""

        return os.path.expandvars(expand_percent_variables(text, os.environ))

    def is_64bit_host(self) -> bool:
        """Detect a 64-bit OS, including 32-bit interpreters under WOW64."""

        if os.environ.get("PROCESSOR_ARCHITEW6432"):
            return True
        return platform.machine().lower() in {"amd64", "x86_64", "arm64", "aarch64"}

    def get_windows_directory(self) -> str:
        """Return `%SystemRoot%`, defaulting to `C:\\Windows`."""

        return (
            os.environ.get("SystemRoot")
            or os.environ.get("windir")
            or _DEFAULT_WINDOWS_DIRECTORY
        )

    def get_system_directory(self) -> str:
        """Return `<Windows directory>\\System32`."""

        return self.get_windows_directory().rstrip("\\") + "\\System32"

    def get_executable_directory(self) -> str:
        """Return the directory of the interpreter or frozen executable."""

        return str(Path(sys.executable).resolve().parent)

    def supports_safe_search(self) -> bool:
        """Return `True` on Windows XP SP2 or later and on non-Windows hosts."""

        if sys.platform != "win32":
            return True
        version = sys.getwindowsversion()
        if (version.major, version.minor) > (5, 1):
            return True
        return (version.major, version.minor) == (5, 1) and version.service_pack_major >= 2


def _read_user_variable(name: str) -> str | None:
    """Read a user-scope variable from `HKEY_CURRENT_USER\\Environment`."""

    try:
        import winreg  # type: ignore
    except ImportError:
        return None
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Environment") as key:
            value, _value_type = winreg.QueryValueEx(key, name)
    except OSError:
        return None
    return str(value)


@dataclass(slots=True)
class StaticEnvironment(EnvironmentAccess):
    """Fixed environment description used for offline resolution and tests.

    Attributes:
        variables: Process-scope variables, also used for `%VAR%` expansion.
        machine_variables: Machine-scope variables (for example `PATH`).
        user_variables: User-scope variables.
        host_64bit: Whether the described host is 64-bit.
        system_directory: System directory path.
        windows_directory: Windows directory path.
        executable_directory: Directory of the program being modelled.
        safe_search_supported: Whether the platform has safe search at all.
        path_separator: Separator for `PATH`-style lists.
    """

    variables: Mapping[str, str] = field(default_factory=dict)
    machine_variables: Mapping[str, str] = field(default_factory=dict)
    user_variables: Mapping[str, str] = field(default_factory=dict)
    host_64bit: bool = True
    system_directory: str = r"C:\Windows\System32"
    windows_directory: str = _DEFAULT_WINDOWS_DIRECTORY
    executable_directory: str = ""
    safe_search_supported: bool = True
    path_separator: str = ";"

    def get_variable(self, name: str, scope: VariableScope) -> str | None:
        """Look a variable up case-insensitively in the mapping for `scope`."""

        source = {
            VariableScope.PROCESS: self.variables,
            VariableScope.USER: self.user_variables,
            VariableScope.MACHINE: self.machine_variables,
        }[scope]
        lowered_name = name.lower()
        for key, value in source.items():
            if key.lower() == lowered_name:
                return value
        return None

    def expand_variables(self, text: str) -> str:
        """Expand `%VAR%` references from process-scope variables."""

        return expand_percent_variables(text, self.variables)

    def is_64bit_host(self) -> bool:
        return self.host_64bit

    def get_system_directory(self) -> str:
        return self.system_directory

    def get_windows_directory(self) -> str:
        return self.windows_directory

    def get_executable_directory(self) -> str:
        return self.executable_directory

    def supports_safe_search(self) -> bool:
        return self.safe_search_supported


def create_environment(configuration_store: ConfigurationStore | None = None) -> EnvironmentAccess:
    """Create the default live environment implementation."""

    if configuration_store is None:
        return SystemEnvironment()
    return SystemEnvironment(configuration_store=configuration_store)
