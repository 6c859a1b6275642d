# Path: core/store/base.py
# Purpose: Define the ImageStore and StoreSnapshot interfaces consumed by listing and fetching.
# Layer: core/store.
# Details: Snapshots are isolated child views whose work is serialized by the snapshot itself.

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Callable, List, Optional, TypeVar

from core.hashing.perceptual import PerceptualHash
from core.models.domain import ImageID, ImageRecord, StoredImage

T = TypeVar("T")


class StoreSnapshot(ABC):
    """Isolated read view over the store's primary state.

    All work against one snapshot runs through ``perform`` on the snapshot's own
    serial execution context.
    """

    @abstractmethod
    def perform(self, work: Callable[["StoreSnapshot"], T]) -> "Future[T]":
        """Schedule ``work`` on the snapshot's serial context and return its future."""

    @abstractmethod
    def resolve(self, image_id: ImageID) -> Optional[StoredImage]:
        """Resolve an id to a live record. Only valid inside ``perform``."""

    @abstractmethod
    def close(self) -> None:
        """Release the snapshot once queued work has run."""


class ImageStore(ABC):
    """Ordered collection of image records with full and thumbnail payloads."""

    @abstractmethod
    def enumerate(self) -> List[ImageRecord]:
        """Return all records with their hashes in list order."""

    @abstractmethod
    def resolve(self, image_id: ImageID) -> Optional[StoredImage]:
        """Resolve an id against the primary state."""

    @abstractmethod
    def new_snapshot(self) -> StoreSnapshot:
        """Open an isolated child view rooted at the primary state."""

    @abstractmethod
    def add_image(
        self,
        image_hash: PerceptualHash,
        data: Optional[bytes],
        thumbnail_data: Optional[bytes] = None,
    ) -> ImageID:
        """Append an image at the end of the ordering and return its id."""

    @abstractmethod
    def remove_image(self, image_id: ImageID) -> bool:
        """Delete an image; return False when the id was not present."""
