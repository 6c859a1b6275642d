# Path: scripts/import_images.py
# Purpose: CLI tool to scan an image folder and import it into the image store.
# Layer: scripts.
# Details: Wires scanning, thumbnailing, and perceptual hashing into the SQLite store.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, configure_logging
from core.indexing import ImageImporter, ImageScanner
from core.store import SqliteImageStore


def main() -> None:
    """Import every supported image under a folder."""

    defaults = AppSettings.from_env()
    parser = argparse.ArgumentParser(description="Import images into a PhotoFlow store")
    parser.add_argument("--folder", type=Path, default=defaults.image_folder, help="Folder containing images to import")
    parser.add_argument("--database", type=Path, default=defaults.database_path, help="SQLite store to write into")
    parser.add_argument("--no-recursive", action="store_true", help="Only import files directly inside the folder")
    args = parser.parse_args()

    settings = defaults.model_copy(update={"image_folder": args.folder, "database_path": args.database})
    configure_logging(settings)

    paths = ImageScanner(settings.image_folder, recursive=not args.no_recursive).scan()
    store = SqliteImageStore(settings.database_path, similarity_threshold=settings.hashing.similarity_threshold)
    try:
        ids = ImageImporter(store, settings).import_paths(paths)
    finally:
        store.close()
    print(f"Imported {len(ids)} of {len(paths)} images into {settings.database_path}")


if __name__ == "__main__":
    main()
