# Path: scripts/show_image_list.py
# Purpose: Print the grouped image list of a store and optionally fetch one image's metadata.
# Layer: scripts.
# Details: Demonstrates list building on the owner thread and a fetch completed on the decode lane.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, configure_logging
from core.errors import ImageManagerError
from core.manager import ImageManager
from core.models.domain import GroupEntry
from core.store import SqliteImageStore


def main() -> None:
    """Print list entries, one line per single image or group."""

    defaults = AppSettings.from_env()
    parser = argparse.ArgumentParser(description="Show the grouped image list of a PhotoFlow store")
    parser.add_argument("--database", type=Path, default=defaults.database_path, help="SQLite store to read")
    parser.add_argument(
        "--drop-trailing-group",
        action="store_true",
        help="Omit the last group, as older list output did",
    )
    parser.add_argument("--metadata", type=int, default=None, help="Also fetch and print metadata for this image id")
    args = parser.parse_args()

    settings = defaults.model_copy(
        update={"database_path": args.database, "flush_trailing_group": not args.drop_trailing_group}
    )
    configure_logging(settings)

    store = SqliteImageStore(settings.database_path, similarity_threshold=settings.hashing.similarity_threshold)
    try:
        with ImageManager(store, settings) as manager:
            for entry in manager.image_list():
                if isinstance(entry, GroupEntry):
                    print(f"group  {', '.join(str(image_id) for image_id in entry.ids)}")
                else:
                    print(f"image  {entry.id}")

            if args.metadata is not None:
                try:
                    metadata = manager.fetch_metadata(args.metadata).result(timeout=settings.fetch.result_timeout)
                except ImageManagerError as exc:
                    print(f"metadata unavailable: {exc}")
                else:
                    print(f"metadata {metadata.width}x{metadata.height} mode={metadata.mode} format={metadata.format}")
    finally:
        store.close()


if __name__ == "__main__":
    main()
