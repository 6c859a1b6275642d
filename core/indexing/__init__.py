# Path: core/indexing/__init__.py
# Purpose: Package initializer for image import utilities.
# Layer: core/indexing.
# Details: Exposes folder scanning and the store importer.

from .importer import ImageImporter
from .scanner import SUPPORTED_EXTENSIONS, ImageScanner

__all__ = ["ImageImporter", "ImageScanner", "SUPPORTED_EXTENSIONS"]
