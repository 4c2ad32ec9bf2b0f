#!/usr/bin/env python3
"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    ptphotogallery is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with ptphotogallery.  If not, see <https://www.gnu.org/licenses/>.
"""

# ============================================================================
# IMPORTS
# ============================================================================

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ptlibs import ptjsonlib, ptprinthelper
from ptlibs.ptprinthelper import ptprint

from ._version import __version__
from .manifest import ManifestBuilder
from .models import GalleryItem
from .scanner import IMAGE_EXTENSIONS


# ============================================================================
# CONSTANTS
# ============================================================================

SCRIPTNAME = "ptphotogallery"

DEFAULT_PROJECT_ROOT = "."
DEFAULT_PHOTOS_DIR   = "photos"
DEFAULT_OUTPUT_FILE  = "gallery.json"


# ============================================================================
# MAIN CLASS
# ============================================================================

class PtPhotoGallery:
    """
    Gallery manifest generator – ptlibs compliant.

    Three-phase process:
    1. Scan {root}/photos recursively for recognized image extensions
    2. Extract dimensions/labels, converting CR2 files to JPEG siblings
    3. Sort newest-first and atomically replace {root}/gallery.json

    Missing photos and per-file failures are warnings; only failing to
    write the manifest is fatal.
    """

    def __init__(self, args: argparse.Namespace) -> None:
        self.ptjsonlib = ptjsonlib.PtJsonLib()
        self.args      = args
        self.echo      = not (self.args.json or self.args.quiet)

        self.project_root = Path(self.args.root).resolve()
        self.photos_dir   = self._under_root(self.args.photos_dir)
        self.output_file  = self._under_root(self.args.output)

        self.logger  = self._setup_logger()
        self.builder = ManifestBuilder(self.project_root, echo=self.echo)
        self._items: List[GalleryItem] = []

        self.ptjsonlib.add_properties({
            "projectRoot":     str(self.project_root),
            "photosDirectory": str(self.photos_dir),
            "manifestPath":    str(self.output_file),
            "timestamp":       datetime.now(timezone.utc).isoformat(),
            "scriptVersion":   __version__,
            "totalImages":     0,
            "converted":       0,
            "failed":          0,
        })

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def _under_root(self, value: str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else self.project_root / path

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger("ptphotogallery")
        logger.setLevel(logging.DEBUG if self.args.verbose else logging.WARNING)
        if self.args.verbose and not self.args.json and not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
            logger.addHandler(handler)
        return logger

    # -------------------------------------------------------------------------
    # MAIN ENTRY
    # -------------------------------------------------------------------------

    def run(self) -> None:
        ptprint("\n" + "=" * 70, "TITLE", condition=self.echo)
        ptprint("PHOTO GALLERY MANIFEST", "TITLE", condition=self.echo)
        ptprint(f"Photos: {self.photos_dir}", "TITLE", condition=self.echo)
        ptprint("=" * 70, "TITLE", condition=self.echo)

        # Write errors propagate to main() and end the run with exit code 99
        self._items = self.builder.generate(self.photos_dir, self.output_file)
        stats = self.builder.stats

        self.ptjsonlib.add_node(self.ptjsonlib.create_node_object(
            "imageScan",
            properties={"directory": str(self.photos_dir),
                        "found": stats["scanned"]}))
        self.ptjsonlib.add_node(self.ptjsonlib.create_node_object(
            "metadataExtraction",
            properties={"emitted": stats["emitted"],
                        "converted": stats["converted"],
                        "reusedConversions": stats["reusedConversions"],
                        "failed": stats["failed"],
                        "duplicates": stats["duplicates"],
                        "withoutDimensions": stats["withoutDimensions"]}))

        self.ptjsonlib.add_node(self.ptjsonlib.create_node_object(
            "manifestWrite",
            properties={"success": True, "path": str(self.output_file),
                        "entries": len(self._items)}))
        self.ptjsonlib.add_properties({
            "totalImages": len(self._items),
            "converted":   stats["converted"],
            "failed":      stats["failed"],
        })

        if stats["failed"]:
            ptprint(f"  Skipped {stats['failed']} file(s) that could not be processed",
                    "WARNING", condition=self.echo)

        self.ptjsonlib.set_status("finished")

    def save_report(self) -> None:
        """In --json mode print the structured result to stdout."""
        if self.args.json:
            ptprint(self.ptjsonlib.get_result_json(), "", self.args.json)


# ============================================================================
# CLI HELPERS
# ============================================================================

def get_help():
    return [
        {"description": [
            "Static photo gallery manifest builder – ptlibs compliant",
            "Scans a photos folder, converts CR2 to JPEG and writes",
            "a newest-first gallery.json for the browser viewer",
        ]},
        {"usage": ["ptphotogallery [options]"]},
        {"usage_example": [
            "ptphotogallery",
            "ptphotogallery -r ./site",
            "ptphotogallery -p albums -o public/gallery.json --json",
        ]},
        {"options": [
            ["-r",  "--root",       "<dir>",  f"Project / serving root (default: {DEFAULT_PROJECT_ROOT})"],
            ["-p",  "--photos-dir", "<dir>",  f"Photos folder under root (default: {DEFAULT_PHOTOS_DIR})"],
            ["-o",  "--output",     "<file>", f"Manifest path under root (default: {DEFAULT_OUTPUT_FILE})"],
            ["-j",  "--json",       "",       "JSON output for platform integration"],
            ["-q",  "--quiet",      "",       "Suppress progress output"],
            ["-v",  "--verbose",    "",       "Verbose logging"],
            ["-h",  "--help",       "",       "Show this help and exit"],
            ["--version",  "",              "Show version and exit"],
        ]},
        {"formats": [
            "Displayable: " + " ".join(sorted(IMAGE_EXTENSIONS - {".cr2"})),
            "Converted:   .cr2 → <name>.jpg (quality 92, optimized), only once",
        ]},
        {"ordering": [
            "Newest modification time first, ties by filename descending",
        ]},
    ]


def parse_args(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv

    parser = argparse.ArgumentParser(
        add_help=False,
        description=f"{SCRIPTNAME} – Static photo gallery manifest builder"
    )
    parser.add_argument("-r", "--root",       type=str, default=DEFAULT_PROJECT_ROOT)
    parser.add_argument("-p", "--photos-dir", type=str, default=DEFAULT_PHOTOS_DIR)
    parser.add_argument("-o", "--output",     type=str, default=DEFAULT_OUTPUT_FILE)
    parser.add_argument("-j", "--json",       action="store_true")
    parser.add_argument("-q", "--quiet",      action="store_true")
    parser.add_argument("-v", "--verbose",    action="store_true")
    parser.add_argument("--version",          action="version",
                        version=f"{SCRIPTNAME} {__version__}")

    if "-h" in argv or "--help" in argv:
        ptprinthelper.help_print(get_help(), SCRIPTNAME, __version__)
        sys.exit(0)

    args = parser.parse_args(argv)
    if args.json:
        args.quiet = True
    ptprinthelper.print_banner(SCRIPTNAME, __version__, args.json or args.quiet)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = None
    try:
        args = parse_args(argv)
        tool = PtPhotoGallery(args)
        tool.run()
        tool.save_report()
        return 0

    except KeyboardInterrupt:
        ptprint("\n✗ Interrupted by user", "WARNING", condition=True)
        return 130
    except Exception as exc:
        if args is not None and args.json:
            ptjsonlib.PtJsonLib().end_error(f"ERROR: {exc}", args.json)
        else:
            ptprint(f"ERROR: {exc}", "ERROR", condition=True)
        return 99


if __name__ == "__main__":
    sys.exit(main())
