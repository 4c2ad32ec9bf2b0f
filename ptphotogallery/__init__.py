"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

from ._version import __version__
from .models import GalleryItem, GalleryState
from .scanner import ImageCatalogScanner
from .extractor import ImageMetadataExtractor
from .manifest import ManifestBuilder
from .renderer import GalleryRenderer, RenderOutcome
from .lightbox import LightboxController
from .session import GallerySession

__all__ = [
    "__version__",
    "GalleryItem",
    "GalleryState",
    "ImageCatalogScanner",
    "ImageMetadataExtractor",
    "ManifestBuilder",
    "GalleryRenderer",
    "RenderOutcome",
    "LightboxController",
    "GallerySession",
]
