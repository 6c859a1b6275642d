# Path: core/hashing/perceptual.py
# Purpose: Provide the perceptual hash value type and its similarity predicate.
# Layer: core/hashing.
# Details: Wraps imagehash.ImageHash; similarity is a Hamming distance threshold.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, TypeVar, runtime_checkable

import imagehash
import numpy as np
from PIL import Image

DEFAULT_HASH_SIZE = 8
DEFAULT_SIMILARITY_THRESHOLD = 10

_H = TypeVar("_H", bound="SimilarityHash")


@runtime_checkable
class SimilarityHash(Protocol):
    """Any hash value that can say whether another value of its kind is similar."""

    def is_similar(self: _H, other: _H) -> bool:
        ...


@dataclass(frozen=True)
class PerceptualHash:
    """A pHash fingerprint.

    ``threshold`` travels with the value so records loaded under one setting
    compare consistently; it does not take part in equality.
    """

    value: imagehash.ImageHash
    threshold: int = field(default=DEFAULT_SIMILARITY_THRESHOLD, compare=False)

    @property
    def bit_length(self) -> int:
        return int(self.value.hash.size)

    def distance(self, other: "PerceptualHash") -> int:
        """Return the Hamming distance to ``other``."""

        return int(self.value - other.value)

    def is_similar(self, other: "PerceptualHash") -> bool:
        """Return True when ``other`` lies within this hash's threshold.

        Hashes of different bit lengths are never similar.
        """

        if self.value.hash.shape != other.value.hash.shape:
            return False
        return self.distance(other) <= self.threshold

    def to_hex(self) -> str:
        return str(self.value)

    @classmethod
    def from_hex(cls, hex_value: str, threshold: int = DEFAULT_SIMILARITY_THRESHOLD) -> "PerceptualHash":
        return cls(imagehash.hex_to_hash(hex_value), threshold=threshold)

    @classmethod
    def from_bits(cls, bits, threshold: int = DEFAULT_SIMILARITY_THRESHOLD) -> "PerceptualHash":
        """Build a hash from a square boolean matrix or a flat bit sequence of square length."""

        array = np.asarray(bits, dtype=bool)
        if array.ndim == 1:
            side = int(round(np.sqrt(array.size)))
            if side * side != array.size:
                raise ValueError(f"Cannot shape {array.size} bits into a square hash.")
            array = array.reshape(side, side)
        return cls(imagehash.ImageHash(array), threshold=threshold)

    def __str__(self) -> str:
        return self.to_hex()


def compute_phash(
    image: Image.Image,
    hash_size: int = DEFAULT_HASH_SIZE,
    threshold: int = DEFAULT_SIMILARITY_THRESHOLD,
) -> PerceptualHash:
    """Compute a perceptual hash for a decoded image."""

    rgb = image.convert("RGB")
    return PerceptualHash(imagehash.phash(rgb, hash_size=hash_size), threshold=threshold)
