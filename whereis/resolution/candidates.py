"""Command name expansion into executable candidate filenames."""

from __future__ import annotations


EXECUTABLE_EXTENSIONS: tuple[str, ...] = (".exe", ".cmd", ".bat")


def has_executable_extension(name: str) -> bool:
    """Return whether `name` already ends in a recognized executable extension."""

    return name.lower().endswith(EXECUTABLE_EXTENSIONS)


def candidate_names(command_name: str) -> tuple[str, ...]:
    """Return filenames to try for a command, in loader preference order.

    A name that already carries an executable extension is returned as is.
    Otherwise each extension is appended in order: binary, then `.cmd`, then
    `.bat` scripts.
    """

    if has_executable_extension(command_name):
        return (command_name,)
    return tuple(f"{command_name}{extension}" for extension in EXECUTABLE_EXTENSIONS)
