"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import ExifTags, Image

try:
    import rawpy
    RAWPY_AVAILABLE = True
except ImportError:
    RAWPY_AVAILABLE = False

from ptlibs.ptprinthelper import ptprint

from .models import ExtractedImage, GalleryItem
from .scanner import RAW_EXTENSION


# ============================================================================
# CONSTANTS
# ============================================================================

JPEG_QUALITY = 92

# EXIF orientations that rotate the picture by 90° – browsers apply them,
# so the displayed box is height × width
TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}

logger = logging.getLogger("ptphotogallery")


# ============================================================================
# EXTRACTOR
# ============================================================================

class ImageMetadataExtractor:
    """
    Turns one scanned file into a manifest entry plus its sort keys.

    Raw files are converted once to a ``<stem>.jpg`` sibling (rawpy decode,
    Pillow JPEG encode q92 optimized); an existing sibling is reused as-is.
    Every failure is contained to the file being processed: the method
    returns ``None`` and the build goes on.
    """

    def __init__(self, serve_root: Union[str, Path], echo: bool = True) -> None:
        self.serve_root = Path(serve_root).resolve()
        self.echo = echo

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def relative_src(self, path: Path) -> str:
        """Path relative to the serving root, always with forward slashes."""
        return Path(os.path.relpath(path, self.serve_root)).as_posix()

    @staticmethod
    def jpeg_sibling(raw_path: Path) -> Path:
        return raw_path.with_name(f"{raw_path.stem}.jpg")

    @staticmethod
    def read_dimensions(path: Path) -> Tuple[int, int]:
        """Displayed (width, height) of an image, honouring EXIF rotation."""
        with Image.open(path) as img:
            width, height = img.size
            orientation = img.getexif().get(ExifTags.Base.Orientation, 1)
        if orientation in TRANSPOSED_ORIENTATIONS:
            width, height = height, width
        return width, height

    def convert_raw(self, raw_path: Path, jpg_path: Path) -> None:
        """Decode a raw camera file and write it as JPEG next to it."""
        if not RAWPY_AVAILABLE:
            raise RuntimeError("rawpy is not installed – no raw decode backend")

        with rawpy.imread(str(raw_path)) as raw:
            rgb = raw.postprocess(use_camera_wb=True, output_bps=8,
                                  output_color=rawpy.ColorSpace.sRGB)

        # Temp name keeps a half-written JPEG from passing as an existing sibling
        tmp_path = jpg_path.with_name(jpg_path.name + ".tmp")
        try:
            Image.fromarray(rgb).save(tmp_path, "JPEG",
                                      quality=JPEG_QUALITY, optimize=True)
            tmp_path.replace(jpg_path)
        finally:
            tmp_path.unlink(missing_ok=True)

    # -------------------------------------------------------------------------
    # MAIN ENTRY
    # -------------------------------------------------------------------------

    def extract(self, file_path: Union[str, Path]) -> Optional[ExtractedImage]:
        path = Path(file_path)
        try:
            return self._extract(path)
        except Exception as exc:
            ptprint(f"Error processing {path}: {exc}",
                    "ERROR", condition=self.echo)
            logger.debug("Extraction failed for %s", path, exc_info=True)
            return None

    def _extract(self, path: Path) -> Optional[ExtractedImage]:
        ext = path.suffix.lower()
        stats = path.stat()
        relative = self.relative_src(path)

        display_path = path
        converted = reused = False

        if ext == RAW_EXTENSION:
            display_path = self.jpeg_sibling(path)
            if display_path.exists():
                reused = True
            else:
                ptprint(f"Converting {relative} to JPG...",
                        "INFO", condition=self.echo)
                try:
                    self.convert_raw(path, display_path)
                except Exception as exc:
                    ptprint(f"Could not convert {relative}: {exc}",
                            "WARNING", condition=self.echo)
                    ptprint("  Make sure rawpy (LibRaw) is installed for CR2 support",
                            "WARNING", condition=self.echo)
                    return None
                converted = True
                ptprint(f"✓ Converted to {self.relative_src(display_path)}",
                        "OK", condition=self.echo)

        width = height = None
        try:
            width, height = self.read_dimensions(display_path)
        except Exception as exc:
            ptprint(f"Could not read dimensions for {self.relative_src(display_path)}: {exc}",
                    "WARNING", condition=self.echo)

        if not (width and height):
            width = height = None

        item = GalleryItem(
            src=self.relative_src(display_path),
            alt=path.stem,
            w=width,
            h=height,
        )
        return ExtractedImage(
            item=item,
            mtime=stats.st_mtime_ns // 1_000_000,
            filename=path.name,
            source_path=str(path),
            converted=converted,
            reused_conversion=reused,
        )
