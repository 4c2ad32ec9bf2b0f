"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

from pathlib import Path
from typing import List, Union

from ptlibs.ptprinthelper import ptprint


# ============================================================================
# CONSTANTS
# ============================================================================

# Raw camera format that browsers cannot display; converted to a JPEG sibling
RAW_EXTENSION = ".cr2"

# Browser-displayable raster formats
DISPLAYABLE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif"}

IMAGE_EXTENSIONS = DISPLAYABLE_EXTENSIONS | {RAW_EXTENSION}


# ============================================================================
# SCANNER
# ============================================================================

class ImageCatalogScanner:
    """
    Recursive image discovery under a root directory.

    Directory entries are visited in sorted name order so that two scans of
    an unchanged tree return the same list. OS errors (permissions, symlink
    loops) are not handled here and reach the caller.
    """

    def __init__(self, extensions=IMAGE_EXTENSIONS, echo: bool = True) -> None:
        self.extensions = {ext.lower() for ext in extensions}
        self.echo = echo

    def scan(self, root_dir: Union[str, Path]) -> List[Path]:
        root = Path(root_dir).resolve()
        if not root.is_dir():
            ptprint(f"Photos directory not found: {root}",
                    "WARNING", condition=self.echo)
            return []

        found: List[Path] = []
        self._walk(root, found)
        return found

    def _walk(self, directory: Path, found: List[Path]) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                self._walk(entry, found)
            elif entry.is_file() and entry.suffix.lower() in self.extensions:
                found.append(entry)
