"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for resolved paths,
search-order explanations and command diagnostics.
"""

from __future__ import annotations

from typing import Iterable, NoReturn

import typer

from .errors import ResolutionStageError
from .models.datatypes import KnownModuleIndex, SearchDirectory, SearchOrder


USAGE = (
    "Usage: whereis [command/filename] [optional:x86/x64] "
    "[optional:working directory] [optional:executable directory]"
)


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ResolutionStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_usage() -> None:
    """Print the one-line usage message."""

    typer.echo(USAGE)


def echo_paths(paths: Iterable[str]) -> None:
    """Print one resolved path per line in discovery order."""

    for path in paths:
        typer.echo(path)


def echo_search_order(
    order: SearchOrder,
    known_modules: KnownModuleIndex,
    matches: list[tuple[SearchDirectory, str]],
) -> None:
    """Print `#`-prefixed lines describing how the hits were found."""

    typer.echo(f"# safe search: {'enabled' if order.safe_search else 'disabled'}")
    typer.echo(
        f"# known modules: {len(known_modules)} "
        f"(directory: {known_modules.directory or 'none'})"
    )
    for position, directory in enumerate(order, start=1):
        typer.echo(f"# {position}. [{directory.source.value}] {directory.path}")
    for directory, path in matches:
        typer.echo(f"# hit [{directory.source.value}] {path}")
