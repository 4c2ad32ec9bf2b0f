"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


# ============================================================================
# ERRORS
# ============================================================================

class GalleryError(Exception):
    """Base class for client-side gallery failures."""


class ManifestLoadError(GalleryError):
    """Manifest could not be fetched or does not match the wire schema."""


# ============================================================================
# MANIFEST ENTRY
# ============================================================================

@dataclass(frozen=True)
class GalleryItem:
    """
    One manifest entry – the persisted wire contract.

    ``w`` and ``h`` are either both set (positive ints) or both ``None``.
    """

    src: str
    alt: str = ""
    w: Optional[int] = None
    h: Optional[int] = None

    def __post_init__(self):
        if (self.w is None) != (self.h is None):
            raise ValueError(f"w/h must be both set or both unset: {self.src}")
        if self.w is not None and (self.w <= 0 or self.h <= 0):
            raise ValueError(f"w/h must be positive: {self.src}")

    @property
    def has_dimensions(self) -> bool:
        return self.w is not None

    @property
    def aspect_ratio(self) -> Optional[float]:
        """Height as a fraction of width, or None when dimensions are unknown."""
        if not self.has_dimensions:
            return None
        return self.h / self.w

    def label(self, index: int) -> str:
        """Display label with the positional fallback used by grid and lightbox."""
        return self.alt or f"Image {index + 1}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"src": self.src, "alt": self.alt}
        if self.has_dimensions:
            data["w"] = self.w
            data["h"] = self.h
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "GalleryItem":
        if not isinstance(data, dict):
            raise ManifestLoadError(f"Manifest entry is not an object: {data!r}")
        src = data.get("src")
        if not isinstance(src, str) or not src:
            raise ManifestLoadError(f"Manifest entry without src: {data!r}")
        alt = data.get("alt") or ""
        if not isinstance(alt, str):
            raise ManifestLoadError(f"Manifest entry alt is not a string: {src}")

        w, h = data.get("w"), data.get("h")
        # A half-specified or non-numeric box is treated as unknown; the
        # renderer corrects it once the real image loads.
        if not (_positive_int(w) and _positive_int(h)):
            w = h = None
        return cls(src=src, alt=alt, w=w, h=h)


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def parse_manifest(payload: Any) -> Tuple[GalleryItem, ...]:
    """Validate a decoded manifest payload (JSON array) into gallery items."""
    if not isinstance(payload, list):
        raise ManifestLoadError("Manifest must be a JSON array")
    return tuple(GalleryItem.from_dict(entry) for entry in payload)


def dump_manifest(items: List[GalleryItem]) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items]


# ============================================================================
# BUILD-TIME RECORD
# ============================================================================

@dataclass(frozen=True)
class ExtractedImage:
    """
    Extractor output: the manifest entry plus build-only fields.

    ``mtime`` (epoch milliseconds) and ``filename`` are sort keys and never
    reach the manifest file.
    """

    item: GalleryItem
    mtime: int
    filename: str
    source_path: str
    converted: bool = False
    reused_conversion: bool = False

    @property
    def sort_key(self) -> Tuple[int, str, str]:
        return (self.mtime, self.filename, self.item.src)


# ============================================================================
# CLIENT STATE
# ============================================================================

@dataclass
class GalleryState:
    """
    Page-session state shared by the renderer and the lightbox.

    ``items`` never changes after load. ``current_index`` is only meaningful
    while ``is_open`` is True.
    """

    items: Tuple[GalleryItem, ...] = field(default_factory=tuple)
    current_index: int = 0
    is_open: bool = False

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def current_item(self) -> Optional[GalleryItem]:
        if not self.is_open or not self.items:
            return None
        return self.items[self.current_index]
