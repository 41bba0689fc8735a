"""Filesystem access adapter used for directory and file probing."""

from __future__ import annotations

import os


class FileSystemAccess:
    """Interface for the existence checks and path joins the resolver performs."""

    def directory_exists(self, path: str) -> bool:
        raise NotImplementedError

    def file_exists(self, path: str) -> bool:
        raise NotImplementedError

    def combine_path(self, directory: str, name: str) -> str:
        raise NotImplementedError

    def get_current_working_directory(self) -> str:
        raise NotImplementedError


class LocalFileSystem(FileSystemAccess):
    """`os.path` backed filesystem of the running host."""

    def directory_exists(self, path: str) -> bool:
        return bool(path) and os.path.isdir(path)

    def file_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def combine_path(self, directory: str, name: str) -> str:
        return os.path.join(directory, name)

    def get_current_working_directory(self) -> str:
        return os.getcwd()
