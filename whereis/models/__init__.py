"""Shared typed data models for whereis.

This package contains dataclasses used across resolution modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    Architecture,
    KnownModuleIndex,
    ResolutionResult,
    SearchDirectory,
    SearchOrder,
    SearchSource,
)

__all__ = [
    "Architecture",
    "KnownModuleIndex",
    "ResolutionResult",
    "SearchDirectory",
    "SearchOrder",
    "SearchSource",
]
