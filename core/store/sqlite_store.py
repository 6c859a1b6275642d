# Path: core/store/sqlite_store.py
# Purpose: Provide a SQLite-backed image store with per-snapshot serial connections.
# Layer: core/store.
# Details: The primary connection belongs to the creating thread; every snapshot opens its own connection on a private worker.

from __future__ import annotations

import logging
import sqlite3
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from core.hashing.perceptual import DEFAULT_SIMILARITY_THRESHOLD, PerceptualHash
from core.models.domain import ImageID, ImageRecord, StoredImage

from .base import ImageStore, StoreSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SELECT_IMAGE = "SELECT id, position, phash, data, thumbnail_data FROM images WHERE id = ?"


def _connect_sqlite(path: Path) -> sqlite3.Connection:
    """Create a SQLite connection with foreign keys enabled."""

    conn = sqlite3.connect(path)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def _row_to_image(row: tuple, threshold: int) -> StoredImage:
    return StoredImage(
        id=int(row[0]),
        position=int(row[1]),
        image_hash=PerceptualHash.from_hex(row[2], threshold=threshold),
        data=row[3],
        thumbnail_data=row[4],
    )


class SqliteSnapshot(StoreSnapshot):
    """A private connection to the database served by a single worker thread."""

    def __init__(self, db_path: Path, similarity_threshold: int) -> None:
        self._db_path = db_path
        self._threshold = similarity_threshold
        self._conn: Optional[sqlite3.Connection] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="store-snapshot")
        self._closed = False

    def perform(self, work: Callable[[StoreSnapshot], T]) -> "Future[T]":
        return self._executor.submit(self._run, work)

    def _run(self, work: Callable[[StoreSnapshot], T]) -> T:
        if self._conn is None:
            self._conn = _connect_sqlite(self._db_path)
            logger.debug("Opened snapshot connection to %s", self._db_path)
        return work(self)

    def resolve(self, image_id: ImageID) -> Optional[StoredImage]:
        if self._conn is None:
            raise RuntimeError("SqliteSnapshot.resolve called outside perform().")
        row = self._conn.execute(_SELECT_IMAGE, (image_id,)).fetchone()
        return _row_to_image(row, self._threshold) if row else None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Queued after pending work so the connection is closed on its own thread.
        self._executor.submit(self._close_connection)
        self._executor.shutdown(wait=False)

    def _close_connection(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed snapshot connection to %s", self._db_path)


class SqliteImageStore(ImageStore):
    """Image store persisted in a single ``images`` table.

    List order is ``position`` then ``id``. The primary connection may only be
    used from the thread that created the store.
    """

    def __init__(self, db_path: Path | str, similarity_threshold: int = DEFAULT_SIMILARITY_THRESHOLD) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.similarity_threshold = similarity_threshold
        self._conn = _connect_sqlite(self.db_path)
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS images (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                position INTEGER NOT NULL,
                phash TEXT NOT NULL,
                data BLOB,
                thumbnail_data BLOB,
                added_at INTEGER
            )
            """
        )
        self._conn.execute("CREATE INDEX IF NOT EXISTS idx_images_position ON images(position)")
        self._conn.commit()

    def enumerate(self) -> List[ImageRecord]:
        rows = self._conn.execute("SELECT id, phash FROM images ORDER BY position, id").fetchall()
        return [
            ImageRecord(id=int(row[0]), image_hash=PerceptualHash.from_hex(row[1], threshold=self.similarity_threshold))
            for row in rows
        ]

    def resolve(self, image_id: ImageID) -> Optional[StoredImage]:
        row = self._conn.execute(_SELECT_IMAGE, (image_id,)).fetchone()
        return _row_to_image(row, self.similarity_threshold) if row else None

    def new_snapshot(self) -> SqliteSnapshot:
        return SqliteSnapshot(self.db_path, self.similarity_threshold)

    def add_image(
        self,
        image_hash: PerceptualHash,
        data: Optional[bytes],
        thumbnail_data: Optional[bytes] = None,
    ) -> ImageID:
        with self._conn:
            row = self._conn.execute("SELECT COALESCE(MAX(position), -1) + 1 FROM images").fetchone()
            cursor = self._conn.execute(
                """
                INSERT INTO images (position, phash, data, thumbnail_data, added_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (int(row[0]), image_hash.to_hex(), data, thumbnail_data, int(time.time())),
            )
        return int(cursor.lastrowid)

    def remove_image(self, image_id: ImageID) -> bool:
        with self._conn:
            cursor = self._conn.execute("DELETE FROM images WHERE id = ?", (image_id,))
        return cursor.rowcount > 0

    def close(self) -> None:
        self._conn.close()

    def __len__(self) -> int:
        return int(self._conn.execute("SELECT COUNT(*) FROM images").fetchone()[0])
