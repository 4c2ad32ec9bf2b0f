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
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

import requests

from .extractor import ImageMetadataExtractor
from .models import GalleryItem, ManifestLoadError, parse_manifest


# ============================================================================
# MANIFEST FETCH
# ============================================================================

FETCH_TIMEOUT = 10
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_manifest(location: Union[str, Path],
                   session: Optional[requests.Session] = None,
                   timeout: float = FETCH_TIMEOUT,
                   clock: Callable[[], float] = time.time) -> Tuple[GalleryItem, ...]:
    """
    Load and validate the manifest.

    HTTP locations get a ``_=<epoch ms>`` query parameter and no-cache
    headers, so a regenerated manifest is never served from a stale cache.
    Any non-2xx status, transport error or schema mismatch raises
    ManifestLoadError.
    """
    location = str(location)

    if not _is_url(location):
        try:
            payload = json.loads(Path(location).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ManifestLoadError(f"Failed to load {location}: {exc}") from exc
        return parse_manifest(payload)

    if session is not None:
        return _fetch_over_http(session, location, timeout, clock)
    with requests.Session() as http:
        return _fetch_over_http(http, location, timeout, clock)


def _fetch_over_http(http: requests.Session, location: str, timeout: float,
                     clock: Callable[[], float]) -> Tuple[GalleryItem, ...]:
    try:
        response = http.get(location,
                            params={"_": int(clock() * 1000)},
                            headers=NO_CACHE_HEADERS,
                            timeout=timeout)
    except requests.RequestException as exc:
        raise ManifestLoadError(f"Failed to load {location}: {exc}") from exc

    if not response.ok:
        raise ManifestLoadError(f"Failed to load {location}: HTTP {response.status_code}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise ManifestLoadError(f"Malformed manifest at {location}: {exc}") from exc
    return parse_manifest(payload)


# ============================================================================
# VISIBILITY WATCHER
# ============================================================================

class Subscription:
    """Handle returned by ``notify_on_enter``; fires at most once."""

    def __init__(self, region: Any, callback: Callable[[Any], None], margin: int) -> None:
        self.region = region
        self.callback = callback
        self.margin = margin
        self.active = True

    def cancel(self) -> None:
        self.active = False

    def fire(self) -> None:
        if not self.active:
            return
        self.active = False
        self.callback(self.region)


class VisibilityWatcher(ABC):
    """Viewport-proximity notifications for layout regions."""

    @abstractmethod
    def notify_on_enter(self, region: Any, callback: Callable[[Any], None],
                        margin: int = 0) -> Subscription:
        """Call ``callback(region)`` once, when ``region`` comes within ``margin`` px of the viewport."""


class ViewportVisibilityWatcher(VisibilityWatcher):
    """
    Vertical scroll viewport.

    ``locate(region)`` returns the region's (top, bottom) in page pixels and
    is consulted on every check, so relayouts are picked up. Regions already
    in range fire as soon as they are subscribed.
    """

    def __init__(self, locate: Callable[[Any], Tuple[float, float]],
                 viewport_height: float = 800, scroll_top: float = 0) -> None:
        self.locate = locate
        self.viewport_height = viewport_height
        self.scroll_top = scroll_top
        self._subscriptions: List[Subscription] = []

    @property
    def pending(self) -> int:
        return sum(1 for sub in self._subscriptions if sub.active)

    def notify_on_enter(self, region, callback, margin=0):
        subscription = Subscription(region, callback, margin)
        self._subscriptions.append(subscription)
        self.check()
        return subscription

    def scroll_to(self, scroll_top: float) -> None:
        self.scroll_top = scroll_top
        self.check()

    def resize(self, viewport_height: float) -> None:
        self.viewport_height = viewport_height
        self.check()

    def in_range(self, subscription: Subscription) -> bool:
        top, bottom = self.locate(subscription.region)
        return (bottom >= self.scroll_top - subscription.margin and
                top <= self.scroll_top + self.viewport_height + subscription.margin)

    def check(self) -> None:
        for subscription in list(self._subscriptions):
            if subscription.active and self.in_range(subscription):
                subscription.fire()
        self._subscriptions = [sub for sub in self._subscriptions if sub.active]


# ============================================================================
# IMAGE LOADER
# ============================================================================

class ImageLoader(ABC):
    """Fetch/decode capability for displayed and prefetched images."""

    @abstractmethod
    def load(self, src: str, on_load: Callable[[int, int], None]) -> None:
        """Start loading ``src``; ``on_load(width, height)`` runs once it is decoded."""

    @abstractmethod
    def prefetch(self, src: str) -> None:
        """Warm the cache for ``src`` without displaying it."""


class LocalImageLoader(ImageLoader):
    """Resolves ``src`` against the serving root and decodes with Pillow."""

    def __init__(self, serve_root: Union[str, Path]) -> None:
        self.serve_root = Path(serve_root)
        self.cache: Dict[str, Tuple[int, int]] = {}
        self.failed: Set[str] = set()

    def _decode(self, src: str) -> Optional[Tuple[int, int]]:
        if src in self.cache:
            return self.cache[src]
        try:
            size = ImageMetadataExtractor.read_dimensions(self.serve_root / src)
        except (OSError, ValueError):
            self.failed.add(src)
            return None
        self.cache[src] = size
        return size

    def load(self, src, on_load):
        size = self._decode(src)
        if size is not None:
            on_load(*size)

    def prefetch(self, src):
        self._decode(src)
