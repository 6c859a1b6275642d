# Path: core/listing/__init__.py
# Purpose: Package initializer for image list building.
# Layer: core/listing.
# Details: Exposes the adjacency clustering entrypoint.

from .list_builder import build_image_list

__all__ = ["build_image_list"]
