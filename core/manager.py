# Path: core/manager.py
# Purpose: Compose list building and asynchronous fetching over one image store.
# Layer: core.
# Details: List and identity operations are confined to the owner thread; fetches may come from any thread.

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import List, Optional

from PIL import Image

from config import AppSettings
from core.errors import ThreadConfinementError
from core.fetch.decoders import decode_bitmap, decode_metadata
from core.fetch.pipeline import FetchPipeline
from core.listing.list_builder import build_image_list
from core.models.domain import FetchVariant, ImageID, ImageListEntry, ImageMetadata, StoredImage
from core.store.base import ImageStore

logger = logging.getLogger(__name__)


class ImageManager:
    """Entry point for browsing and loading the images of one store.

    ``image_list`` and ``image_record`` read the store's primary state and may
    only be called from the thread that created the manager. The ``fetch_*``
    methods return futures completed on the pipeline's decode lane.
    """

    def __init__(
        self,
        store: ImageStore,
        settings: Optional[AppSettings] = None,
        pipeline: Optional[FetchPipeline] = None,
    ) -> None:
        self.store = store
        self.settings = settings or AppSettings()
        self.pipeline = pipeline or FetchPipeline(store, lane_name=self.settings.fetch.lane_name)
        self._owner = threading.get_ident()

    def _check_owner(self, operation: str) -> None:
        if threading.get_ident() != self._owner:
            raise ThreadConfinementError(f"ImageManager.{operation} must be called from the owning thread.")

    def image_list(self) -> List[ImageListEntry]:
        """Build the grouped image list from the store's current contents."""

        self._check_owner("image_list")
        records = self.store.enumerate()
        entries = build_image_list(records, flush_trailing_group=self.settings.flush_trailing_group)
        logger.debug("Built %d list entries from %d images", len(entries), len(records))
        return entries

    def image_record(self, image_id: ImageID) -> Optional[StoredImage]:
        """Resolve an id against the primary state; None if it is not present."""

        self._check_owner("image_record")
        return self.store.resolve(image_id)

    def fetch_image_data(self, image_id: ImageID, thumbnail: bool = False) -> "Future[bytes]":
        return self.pipeline.fetch(image_id, FetchVariant.from_flag(thumbnail))

    def fetch_metadata(self, image_id: ImageID) -> "Future[ImageMetadata]":
        """Metadata is always read from the full-size payload."""

        return self.pipeline.fetch_mapped(image_id, FetchVariant.FULL, decode_metadata)

    def fetch_image(self, image_id: ImageID, thumbnail: bool = False) -> "Future[Image.Image]":
        return self.pipeline.fetch_mapped(image_id, FetchVariant.from_flag(thumbnail), decode_bitmap)

    def close(self) -> None:
        self.pipeline.close()

    def __enter__(self) -> "ImageManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
