"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from auto_filename.models import Configuration
from auto_filename.storage import FilesystemStorage, InMemoryStorage


# ---------------------------------------------------------------------------
# Auto-marker: tag every test as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> Configuration:
    """Default settings with no debounce delay."""
    return Configuration(check_interval=0)


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """An empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def fs_storage(vault: Path) -> FilesystemStorage:
    return FilesystemStorage(vault)
