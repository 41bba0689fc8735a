"""Search-order resolution: known modules, search order and name resolution."""

from .candidates import EXECUTABLE_EXTENSIONS, candidate_names, has_executable_extension
from .known_modules import load_known_module_index
from .resolver import (
    WhereisResolver,
    create_resolver,
    find_command,
    find_file,
    host_architecture,
    resolve_command,
    resolve_file,
)
from .search_order import build_search_order, is_safe_search_enabled

__all__ = [
    "EXECUTABLE_EXTENSIONS",
    "WhereisResolver",
    "build_search_order",
    "candidate_names",
    "create_resolver",
    "find_command",
    "find_file",
    "has_executable_extension",
    "host_architecture",
    "is_safe_search_enabled",
    "load_known_module_index",
    "resolve_command",
    "resolve_file",
]
