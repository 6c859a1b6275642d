"""Shared pytest fixtures for PhotoFlow tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from config import AppSettings
from core.store.sqlite_store import SqliteImageStore
from factories import make_hash, make_image_bytes


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_settings(temp_dir: Path) -> AppSettings:
    """Settings pointing at a database inside the temporary directory."""
    return AppSettings(image_folder=temp_dir / "images", database_path=temp_dir / "db" / "store.sqlite3")


@pytest.fixture
def store(test_settings: AppSettings) -> Generator[SqliteImageStore, None, None]:
    """An empty SQLite store."""
    image_store = SqliteImageStore(test_settings.database_path)
    try:
        yield image_store
    finally:
        image_store.close()


@pytest.fixture
def populated_store(store: SqliteImageStore) -> SqliteImageStore:
    """Store with two similar images, then one dissimilar image lacking a thumbnail.

    Ids are 1, 2 and 3 in insertion order.
    """
    store.add_image(make_hash(0), make_image_bytes((64, 48)), make_image_bytes((16, 12)))
    store.add_image(make_hash(3), make_image_bytes((32, 32), (10, 200, 10)), make_image_bytes((8, 8)))
    store.add_image(make_hash(40), make_image_bytes((20, 10), (0, 0, 255)), None)
    return store
