"""Top-level package for whereis.

This package replays the Windows loader search order to report every location
a command or module would be loaded from, in precedence order. The main entry
point is `WhereisResolver`.
"""

from .errors import InvalidArgumentError
from .models.datatypes import Architecture, ResolutionResult
from .resolution.resolver import (
    WhereisResolver,
    create_resolver,
    find_command,
    find_file,
    resolve_command,
    resolve_file,
)

__all__ = [
    "Architecture",
    "InvalidArgumentError",
    "ResolutionResult",
    "WhereisResolver",
    "__version__",
    "create_resolver",
    "find_command",
    "find_file",
    "resolve_command",
    "resolve_file",
]

__version__ = "0.1.0"
