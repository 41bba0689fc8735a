"""Shared pytest fixtures for the full whereis test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.loader_layout import LoaderLayout


@pytest.fixture
def layout(tmp_path: Path) -> LoaderLayout:
    """Provide a simulated loader directory tree under a temp directory."""

    return LoaderLayout.create(tmp_path)
