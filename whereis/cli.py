"""Command-line interface for whereis.

Responsibilities:
- Parse the positional `NAME [ARCH] [WORKING_DIR] [EXECUTABLE_DIR]` surface.
- Merge CLI, environment and YAML settings into `WhereisConfig`.
- Resolve the name and print one absolute path per line.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from .adapters.filesystem import LocalFileSystem
from .adapters.registry import ConfigurationStore, SnapshotConfigurationStore
from .cli_rendering import echo_paths, echo_search_order, echo_usage, exit_with_command_error
from .config import ConfigLoader, WhereisConfig, resolve_effective_config
from .errors import ResolutionStageError
from .parsing import normalize_optional_string, parse_architecture_token
from .resolution.resolver import WhereisResolver, create_resolver
from .telemetry.logger import ProbeLogger

app = typer.Typer(
    name="whereis",
    add_completion=False,
    help="Show where the Windows loader would find a command or module.",
)


def _load_yaml_config(config_path: Path | None) -> WhereisConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise ResolutionStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ResolutionStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise ResolutionStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _load_env_config() -> WhereisConfig:
    """Load `WHEREIS_*` settings and map validation failures to stage errors."""

    try:
        return ConfigLoader.from_env()
    except ValueError as exc:
        raise ResolutionStageError(
            stage="config",
            detail=f"Invalid environment setting: {exc}",
            hint="Fix or unset the `WHEREIS_*` environment variable.",
        ) from exc


def _load_registry_snapshot(snapshot_path: Path | None) -> ConfigurationStore | None:
    """Load a registry snapshot when configured and map failures to stage errors."""

    if snapshot_path is None:
        return None

    try:
        return SnapshotConfigurationStore.from_yaml(snapshot_path)
    except FileNotFoundError as exc:
        raise ResolutionStageError(
            stage="registry-snapshot",
            detail=f"Registry snapshot not found: `{snapshot_path}`.",
            hint="Provide an existing path via `--registry-snapshot <path.yaml>`.",
        ) from exc
    except Exception as exc:
        raise ResolutionStageError(
            stage="registry-snapshot",
            detail=f"Failed to load registry snapshot `{snapshot_path}`: {exc}",
            hint="The snapshot must map key paths to value-name mappings.",
        ) from exc


def _existing_directory(value: str | Path | None) -> str | None:
    """Return the override as a string when it names an existing directory."""

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    if not LocalFileSystem().directory_exists(normalized):
        return None
    return normalized


def _resolve_command_config(
    architecture_token: str | None,
    working_directory: str | None,
    executable_directory: str | None,
    config_file: Path | None,
    registry_snapshot: Path | None,
    safe_search: bool | None,
) -> WhereisConfig:
    """Resolve effective settings from YAML, environment and explicit CLI values.

    Unknown architecture tokens and overrides that are not existing
    directories are ignored in favor of the lower-precedence values.
    """

    cli_working_directory = _existing_directory(working_directory)
    cli_executable_directory = _existing_directory(executable_directory)
    cli_config = WhereisConfig(
        architecture=parse_architecture_token(architecture_token),
        working_directory=(
            Path(cli_working_directory) if cli_working_directory is not None else None
        ),
        executable_directory=(
            Path(cli_executable_directory) if cli_executable_directory is not None else None
        ),
        safe_search=safe_search,
        registry_snapshot=registry_snapshot,
    )
    return resolve_effective_config(
        cli=cli_config,
        env=_load_env_config(),
        file=_load_yaml_config(config_file),
    )


def _build_resolver(config: WhereisConfig, verbose: bool) -> WhereisResolver:
    """Create a resolver for the effective settings."""

    logger = ProbeLogger(sink=sys.stderr) if verbose else None
    return create_resolver(
        configuration_store=_load_registry_snapshot(config.registry_snapshot),
        logger=logger,
        safe_search=config.safe_search,
    )


@app.command()
def whereis_command(
    name: Annotated[
        str | None,
        typer.Argument(
            help="Command (`tool`) or filename (`module.dll`) to locate.",
            show_default=False,
        ),
    ] = None,
    architecture: Annotated[
        str | None,
        typer.Argument(
            help="Target architecture `x86` or `x64`. Defaults to the host architecture.",
            show_default=False,
        ),
    ] = None,
    working_directory: Annotated[
        str | None,
        typer.Argument(help="Working directory to model.", show_default=False),
    ] = None,
    executable_directory: Annotated[
        str | None,
        typer.Argument(help="Directory of the executable to model.", show_default=False),
    ] = None,
    first: Annotated[
        bool,
        typer.Option("--first", help="Print only the path the loader would pick."),
    ] = False,
    explain: Annotated[
        bool,
        typer.Option("--explain", help="Print the search order and the source of each hit."),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with defaults."),
    ] = None,
    registry_snapshot: Annotated[
        Path | None,
        typer.Option(
            "--registry-snapshot",
            help="YAML registry snapshot to read instead of the live registry.",
        ),
    ] = None,
    safe_search: Annotated[
        bool | None,
        typer.Option(
            "--safe-search/--no-safe-search",
            help="Force safe search mode instead of reading it from the registry.",
            show_default=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log search-order construction and probes to stderr."),
    ] = False,
) -> None:
    """Print every location of NAME in the order the loader would search."""

    if name is None:
        echo_usage()
        return

    try:
        config = _resolve_command_config(
            architecture_token=architecture,
            working_directory=working_directory,
            executable_directory=executable_directory,
            config_file=config_file,
            registry_snapshot=registry_snapshot,
            safe_search=safe_search,
        )
        resolver = _build_resolver(config, verbose)
        working = str(config.working_directory) if config.working_directory else None
        executable = str(config.executable_directory) if config.executable_directory else None

        if "." in name:
            matches = resolver.explain_file(name, config.architecture, working, executable)
        else:
            matches = resolver.explain_command(name, config.architecture, working, executable)

        if explain:
            echo_search_order(
                resolver.search_order(working, executable),
                resolver.known_modules(config.architecture),
                matches,
            )
    except Exception as exc:
        exit_with_command_error("whereis", exc)

    paths = [path for _directory, path in matches]
    echo_paths(paths[:1] if first else paths)


def main() -> None:
    """Run the CLI application."""

    app()
