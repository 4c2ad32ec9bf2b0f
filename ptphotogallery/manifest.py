"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ptlibs.ptprinthelper import ptprint

from .extractor import ImageMetadataExtractor
from .models import ExtractedImage, GalleryItem, dump_manifest
from .scanner import ImageCatalogScanner


# ============================================================================
# SERIALIZATION
# ============================================================================

def sort_newest_first(records: Iterable[ExtractedImage]) -> List[ExtractedImage]:
    """mtime descending, then filename descending, then src descending."""
    return sorted(records, key=lambda r: r.sort_key, reverse=True)


def serialize_manifest(items: List[GalleryItem]) -> str:
    return json.dumps(dump_manifest(items), indent=2, ensure_ascii=False) + "\n"


def _target_mode(path: Path) -> int:
    """Mode of the file being replaced, else 0666 masked by the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_atomic(path: Path, text: str) -> None:
    """
    Replace ``path`` with ``text`` so readers see either the old or the new
    file, never a truncated one. The temp file lives in the same directory,
    so the final ``os.replace`` stays on one filesystem. mkstemp creates the
    file as 0600; it gets the target's mode before the rename.
    """
    mode = _target_mode(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp",
                                    dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# ============================================================================
# BUILDER
# ============================================================================

class ManifestBuilder:
    """
    Scan → extract → dedupe → sort → strip → write.

    The manifest is regenerated from scratch on every run. Per-file failures
    only shrink the manifest; failing to write it is the caller's problem.
    """

    def __init__(self, serve_root: Union[str, Path],
                 scanner: Optional[ImageCatalogScanner] = None,
                 extractor: Optional[ImageMetadataExtractor] = None,
                 echo: bool = True) -> None:
        self.serve_root = Path(serve_root).resolve()
        self.echo = echo
        self.scanner = scanner or ImageCatalogScanner(echo=echo)
        self.extractor = extractor or ImageMetadataExtractor(self.serve_root, echo=echo)

        self.stats: Dict[str, int] = {}
        self._reset_stats()

    def _reset_stats(self) -> None:
        self.stats = {
            "scanned":           0,
            "emitted":           0,
            "converted":         0,
            "reusedConversions": 0,
            "failed":            0,
            "duplicates":        0,
            "withoutDimensions": 0,
        }

    # -------------------------------------------------------------------------
    # PIPELINE
    # -------------------------------------------------------------------------

    def collect(self, files: List[Path]) -> List[ExtractedImage]:
        """Run the extractor over every file, isolating failures per file."""
        records: List[ExtractedImage] = []
        total = len(files)
        for idx, file_path in enumerate(files, 1):
            record = self.extractor.extract(file_path)
            if record is None:
                self.stats["failed"] += 1
            else:
                records.append(record)
                self.stats["converted"] += record.converted
                self.stats["reusedConversions"] += record.reused_conversion
            if idx % 100 == 0:
                ptprint(f"  {idx}/{total} ({idx * 100 // total}%)",
                        "INFO", condition=self.echo)
        return records

    def dedupe(self, records: List[ExtractedImage]) -> List[ExtractedImage]:
        """
        One entry per ``src``. A raw file and its JPEG sibling both resolve to
        the JPEG; the raw record is kept, so the entry sorts by the raw file's
        mtime and filename whether or not the sibling was already on disk.
        """
        by_src: Dict[str, ExtractedImage] = {}
        for record in records:
            current = by_src.get(record.item.src)
            if current is None:
                by_src[record.item.src] = record
                continue
            self.stats["duplicates"] += 1
            if self._from_raw(record) and not self._from_raw(current):
                by_src[record.item.src] = record
        return list(by_src.values())

    def _from_raw(self, record: ExtractedImage) -> bool:
        return self.extractor.relative_src(Path(record.source_path)) != record.item.src

    def build(self, root_dir: Union[str, Path]) -> List[GalleryItem]:
        self._reset_stats()

        ptprint("Scanning photos directory...", "INFO", condition=self.echo)
        files = self.scanner.scan(root_dir)
        self.stats["scanned"] = len(files)

        if not files:
            ptprint("No images found in photos directory.",
                    "WARNING", condition=self.echo)
            return []

        ptprint(f"Found {len(files)} images. Processing...",
                "INFO", condition=self.echo)

        records = sort_newest_first(self.dedupe(self.collect(files)))
        items = [record.item for record in records]

        self.stats["emitted"] = len(items)
        self.stats["withoutDimensions"] = sum(1 for i in items if not i.has_dimensions)

        if not items:
            ptprint("All images failed processing – manifest will be empty.",
                    "WARNING", condition=self.echo)
        return items

    def write(self, items: List[GalleryItem], output_path: Union[str, Path]) -> Path:
        path = Path(output_path)
        write_atomic(path, serialize_manifest(items))
        return path

    def generate(self, root_dir: Union[str, Path],
                 output_path: Union[str, Path]) -> List[GalleryItem]:
        items = self.build(root_dir)
        path = self.write(items, output_path)
        if items:
            ptprint(f"✓ Generated {path.name} with {len(items)} images",
                    "OK", condition=self.echo)
        else:
            ptprint(f"Generated empty {path.name}", "OK", condition=self.echo)
        ptprint(f"  Output: {path}", "INFO", condition=self.echo)
        return items
