# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across listing, fetching, and import layers.

from .domain import (
    FetchRequest,
    FetchVariant,
    GroupEntry,
    ImageEntry,
    ImageID,
    ImageListEntry,
    ImageMetadata,
    ImageRecord,
    StoredImage,
    entry_ids,
)

__all__ = [
    "FetchRequest",
    "FetchVariant",
    "GroupEntry",
    "ImageEntry",
    "ImageID",
    "ImageListEntry",
    "ImageMetadata",
    "ImageRecord",
    "StoredImage",
    "entry_ids",
]
