"""Structured probe logging utilities.

Responsibilities:
- Emit concise, deterministic logs describing how a search order was built.
- Record probe hits and degraded sources without aborting resolution.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character
        if character.isalnum() or character in {"-", "_", ".", ":", "/", "\\", "%"}
        else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class ProbeLogger:
    """Emit deterministic logs for search-order construction and probing."""

    def __init__(self, sink: TextIO | None = None, level: str = "DEBUG") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured log line."""

        line = f"[whereis] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_safe_search(self, enabled: bool, source: str) -> None:
        """Record the safe search mode and where it was decided."""

        self._emit("DEBUG", "safe-search", "search-order", enabled=enabled, source=source)

    def log_search_order(self, directory_count: int, safe_search: bool) -> None:
        """Record the size of the built search order."""

        self._emit(
            "DEBUG",
            "built",
            "search-order",
            directories=directory_count,
            safe_search=safe_search,
        )

    def log_known_modules(self, module_count: int, directory: str | None) -> None:
        """Record the loaded known-module index."""

        self._emit(
            "DEBUG",
            "loaded",
            "known-modules",
            directory=directory or "none",
            modules=module_count,
        )

    def log_hit(self, name: str, path: str, source: str) -> None:
        """Record one existing match."""

        self._emit("INFO", "hit", "probe", name=name, path=path, source=source)

    def log_degraded(self, stage: str, reason: str, **context: object) -> None:
        """Record a source that contributed nothing because it could not be read."""

        self._emit("WARNING", "degraded", stage, reason=reason, **context)
