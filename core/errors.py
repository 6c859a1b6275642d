# Path: core/errors.py
# Purpose: Define the error taxonomy reported by the image manager.
# Layer: core.
# Details: PayloadMissing and DecodeFailed both derive from UnableToReadImage so callers may match either granularity.

from __future__ import annotations

from typing import Optional


class ImageManagerError(Exception):
    """Base class for terminal fetch failures."""

    def __init__(self, image_id: Optional[int] = None, message: Optional[str] = None) -> None:
        self.image_id = image_id
        super().__init__(message or self.default_message())

    def default_message(self) -> str:
        return f"Image {self.image_id} failed"


class ImageNotFound(ImageManagerError):
    """The id does not resolve to a live record in the snapshot."""

    def default_message(self) -> str:
        return f"Image {self.image_id} not found"


class UnableToReadImage(ImageManagerError):
    """The selected payload is absent or could not be decoded."""

    def default_message(self) -> str:
        return f"Unable to read image {self.image_id}"


class PayloadMissing(UnableToReadImage):
    """The record exists but the requested payload is empty."""

    def default_message(self) -> str:
        return f"Image {self.image_id} has no stored payload"


class DecodeFailed(UnableToReadImage):
    """The payload exists but decoding or metadata extraction failed."""

    def default_message(self) -> str:
        return f"Image {self.image_id} could not be decoded"


class ThreadConfinementError(RuntimeError):
    """An owner-thread-only operation was called from another thread."""


__all__ = [
    "DecodeFailed",
    "ImageManagerError",
    "ImageNotFound",
    "PayloadMissing",
    "ThreadConfinementError",
    "UnableToReadImage",
]
