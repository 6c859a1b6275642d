# Path: core/indexing/importer.py
# Purpose: Import image files into the store with thumbnails and perceptual hashes.
# Layer: core/indexing.
# Details: Each image is decoded once with Pillow to derive both the thumbnail and the pHash.

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from PIL import Image
from tqdm import tqdm

from config import AppSettings
from core.errors import DecodeFailed
from core.fetch.decoders import decode_bitmap
from core.hashing.perceptual import PerceptualHash, compute_phash
from core.models.domain import ImageID
from core.store.base import ImageStore

logger = logging.getLogger(__name__)


class ImageImporter:
    """Append images to a store in the order they are supplied."""

    def __init__(self, store: ImageStore, settings: Optional[AppSettings] = None) -> None:
        self.store = store
        self.settings = settings or AppSettings()

    def import_bytes(self, data: bytes) -> ImageID:
        """Store ``data`` with a generated thumbnail and pHash; return the new id.

        Raises DecodeFailed when ``data`` is not a readable image.
        """

        image = decode_bitmap(data)
        image_hash, thumbnail = self._derive(image)
        return self.store.add_image(image_hash, data, thumbnail)

    def import_paths(self, paths: Iterable[Path], show_progress: bool = True) -> List[ImageID]:
        """Import files in order, skipping ones that cannot be read or encoded.

        Store errors are not caught.
        """

        ids: List[ImageID] = []
        for path in tqdm(list(paths), desc="Importing images", unit="img", disable=not show_progress):
            try:
                data = Path(path).read_bytes()
                ids.append(self.import_bytes(data))
            except (OSError, ValueError, KeyError, DecodeFailed) as exc:
                logger.warning("Skipping %s: %s", path, exc)
        logger.info("Imported %d images", len(ids))
        return ids

    def _derive(self, image: Image.Image) -> Tuple[PerceptualHash, bytes]:
        hashing = self.settings.hashing
        image_hash = compute_phash(image, hash_size=hashing.hash_size, threshold=hashing.similarity_threshold)
        return image_hash, self._make_thumbnail(image)

    def _make_thumbnail(self, image: Image.Image) -> bytes:
        options = self.settings.thumbnails
        thumbnail = image.convert("RGB") if options.format.upper() == "JPEG" else image.copy()
        thumbnail.thumbnail((options.max_size, options.max_size))
        buffer = io.BytesIO()
        thumbnail.save(buffer, format=options.format, quality=options.quality)
        return buffer.getvalue()
