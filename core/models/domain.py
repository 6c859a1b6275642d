# Path: core/models/domain.py
# Purpose: Define domain models shared across listing, fetching, and import workflows.
# Layer: core/models.
# Details: Lightweight frozen dataclasses; list entries reference images by id only.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from PIL import Image
from PIL.ExifTags import TAGS

from core.hashing.perceptual import PerceptualHash

ImageID = int


@dataclass(frozen=True)
class ImageRecord:
    """An image identifier paired with its precomputed perceptual hash."""

    id: ImageID
    image_hash: PerceptualHash


@dataclass(frozen=True)
class ImageEntry:
    """List entry referring to a single image."""

    id: ImageID

    @property
    def ids(self) -> Tuple[ImageID, ...]:
        return (self.id,)


@dataclass(frozen=True)
class GroupEntry:
    """List entry holding a run of visually similar adjacent images.

    Groups always contain at least two single-image entries and are never nested.
    """

    contents: Tuple[ImageEntry, ...]

    def __post_init__(self) -> None:
        contents = tuple(self.contents)
        if len(contents) < 2:
            raise ValueError("A group needs at least two members; use ImageEntry for a single image.")
        if not all(isinstance(entry, ImageEntry) for entry in contents):
            raise ValueError("Groups may only contain ImageEntry members.")
        object.__setattr__(self, "contents", contents)

    @property
    def ids(self) -> Tuple[ImageID, ...]:
        return tuple(entry.id for entry in self.contents)


ImageListEntry = Union[ImageEntry, GroupEntry]


def entry_ids(entries: Iterable[ImageListEntry]) -> List[ImageID]:
    """Flatten list entries into the image ids they reference, in order."""

    ids: List[ImageID] = []
    for entry in entries:
        ids.extend(entry.ids)
    return ids


class FetchVariant(Enum):
    """Which stored payload a fetch reads."""

    FULL = "full"
    THUMBNAIL = "thumbnail"

    @classmethod
    def from_flag(cls, thumbnail: bool) -> "FetchVariant":
        return cls.THUMBNAIL if thumbnail else cls.FULL


@dataclass(frozen=True)
class FetchRequest:
    """A single read of one image payload."""

    id: ImageID
    variant: FetchVariant = FetchVariant.FULL


@dataclass
class StoredImage:
    """An image row as resolved inside one store snapshot."""

    id: ImageID
    position: int
    image_hash: PerceptualHash
    data: Optional[bytes] = None
    thumbnail_data: Optional[bytes] = None

    def payload(self, variant: FetchVariant) -> Optional[bytes]:
        """Return the raw bytes selected by ``variant`` (None when absent)."""

        return self.thumbnail_data if variant is FetchVariant.THUMBNAIL else self.data


@dataclass
class ImageMetadata:
    """Properties extracted from a decoded image."""

    width: int
    height: int
    mode: str
    format: Optional[str] = None
    exif: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_image(cls, image: Image.Image) -> "ImageMetadata":
        exif: Dict[str, Any] = {}
        for tag_id, value in image.getexif().items():
            exif[TAGS.get(tag_id, str(tag_id))] = value
        return cls(width=image.width, height=image.height, mode=image.mode, format=image.format, exif=exif)
