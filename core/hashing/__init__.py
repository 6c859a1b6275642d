# Path: core/hashing/__init__.py
# Purpose: Package initializer for perceptual hashing.
# Layer: core/hashing.
# Details: Exposes the hash value type, its protocol, and the hash computation helper.

from .perceptual import PerceptualHash, SimilarityHash, compute_phash

__all__ = ["PerceptualHash", "SimilarityHash", "compute_phash"]
