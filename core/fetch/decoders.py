# Path: core/fetch/decoders.py
# Purpose: Decode raw image bytes into bitmaps and metadata.
# Layer: core/fetch.
# Details: Pillow-based; every decoding failure surfaces as DecodeFailed.

from __future__ import annotations

import io

from PIL import Image

from core.errors import DecodeFailed
from core.models.domain import ImageMetadata


def _open_fully(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeFailed(message=f"Cannot decode image bytes: {exc}") from exc
    return image


def decode_bitmap(data: bytes) -> Image.Image:
    """Return a fully loaded PIL image for ``data``."""

    return _open_fully(data)


def decode_metadata(data: bytes) -> ImageMetadata:
    """Decode ``data`` and extract its metadata."""

    return ImageMetadata.from_image(_open_fully(data))
