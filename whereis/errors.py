"""Domain exceptions for resolution and CLI diagnostics."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a required resolution input is missing or malformed."""


class ResolutionStageError(RuntimeError):
    """Raised when a specific stage of a CLI resolution run fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped resolution error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
