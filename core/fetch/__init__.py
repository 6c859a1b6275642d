# Path: core/fetch/__init__.py
# Purpose: Package initializer for asynchronous image fetching.
# Layer: core/fetch.
# Details: Exposes the fetch pipeline, its decode lane, and the Pillow decoders.

from .decoders import decode_bitmap, decode_metadata
from .lane import DecodeLane
from .pipeline import FetchPipeline

__all__ = ["DecodeLane", "FetchPipeline", "decode_bitmap", "decode_metadata"]
