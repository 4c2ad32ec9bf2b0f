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
from typing import Callable, Optional, Tuple, Union

from .capabilities import (ImageLoader, LocalImageLoader, VisibilityWatcher,
                           ViewportVisibilityWatcher, fetch_manifest)
from .events import EventDispatcher, GalleryEvent
from .lightbox import LightboxController
from .models import GalleryItem, GalleryState
from .renderer import GalleryRenderer, MasonryLayout, RenderOutcome


class GallerySession:
    """
    One page load: a single GalleryState shared by renderer and lightbox,
    wired through one synchronous dispatcher.

    Without explicit capabilities the session decodes images from
    ``serve_root`` and uses a scroll viewport over the masonry layout.
    """

    def __init__(self, manifest_location: Union[str, Path],
                 serve_root: Union[str, Path] = ".",
                 loader: Optional[ImageLoader] = None,
                 watcher: Optional[VisibilityWatcher] = None,
                 fetch: Callable[[str], Tuple[GalleryItem, ...]] = fetch_manifest,
                 columns: int = 3) -> None:
        self.state = GalleryState()
        self.dispatcher = EventDispatcher()
        self.loader = loader or LocalImageLoader(serve_root)
        self.watcher = watcher or ViewportVisibilityWatcher(lambda cell: cell.bounds)

        self.lightbox = LightboxController(self.state, self.dispatcher, self.loader)
        self.renderer = GalleryRenderer(
            self.state, manifest_location, self.dispatcher,
            self.watcher, self.loader, self.lightbox.open,
            fetch=fetch, layout=MasonryLayout(columns),
        )

    def load(self) -> RenderOutcome:
        return self.renderer.load()

    # Input entry points --------------------------------------------------

    def click_cell(self, index: int) -> None:
        self.dispatcher.dispatch(GalleryEvent.cell_clicked(index))

    def press_key(self, key: str) -> None:
        self.dispatcher.dispatch(GalleryEvent.key_pressed(key))

    def swipe(self, start_x: float, end_x: float) -> None:
        self.lightbox.touch_start(start_x)
        self.lightbox.touch_end(end_x)
