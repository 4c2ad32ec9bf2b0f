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
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .capabilities import ImageLoader, VisibilityWatcher, fetch_manifest
from .events import EventDispatcher, EventType, GalleryEvent
from .models import GalleryItem, GalleryState, ManifestLoadError


# ============================================================================
# CONSTANTS
# ============================================================================

EAGER_COUNT            = 6      # above-the-fold cells load immediately
LAZY_MARGIN_PX         = 50
ESTIMATED_COLUMN_WIDTH = 300    # px, masonry row-span estimate
GRID_ROW_HEIGHT        = 10     # px, grid-auto-rows
SQUARE_PADDING         = 100.0

EMPTY_MESSAGE = "No images found. Add photos to the /photos folder."
ERROR_MESSAGE = "Error loading gallery. Please ensure gallery.json exists."

logger = logging.getLogger("ptphotogallery")


class RenderOutcome(Enum):
    RENDERED = "rendered"
    EMPTY    = "empty"
    ERROR    = "error"


class CellStatus(Enum):
    LOADING = "loading"
    LOADED  = "loaded"


def row_span_for(ratio: float) -> int:
    return math.ceil(ESTIMATED_COLUMN_WIDTH * ratio / GRID_ROW_HEIGHT)


# ============================================================================
# GRID CELL
# ============================================================================

@dataclass
class GridCell:
    """
    One grid position. ``padding_bottom`` is the aspect box height as a
    percentage of the cell width; ``top``/``column`` are set by the layout.
    """

    index: int
    item: GalleryItem
    label: str
    eager: bool
    padding_bottom: float = SQUARE_PADDING
    row_span: int = 0
    status: CellStatus = CellStatus.LOADING
    requested_src: Optional[str] = None
    column: int = 0
    top: int = 0

    def __post_init__(self):
        ratio = self.item.aspect_ratio
        self.reserve(ratio if ratio is not None else 1.0)

    def reserve(self, ratio: float) -> None:
        self.padding_bottom = ratio * 100
        self.row_span = row_span_for(ratio)

    @property
    def height(self) -> int:
        return self.row_span * GRID_ROW_HEIGHT

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.top, self.top + self.height


class MasonryLayout:
    """Places each cell in the currently shortest column, in manifest order."""

    def __init__(self, columns: int = 3) -> None:
        self.columns = max(1, columns)

    def arrange(self, cells: List[GridCell]) -> None:
        heights = [0] * self.columns
        for cell in cells:
            column = heights.index(min(heights))
            cell.column = column
            cell.top = heights[column]
            heights[column] += cell.height


# ============================================================================
# RENDERER
# ============================================================================

class GalleryRenderer:
    """
    Builds the grid from the manifest and drives per-cell image loading.

    The renderer only reads ``state.items``; clicking a cell is forwarded to
    ``open_request`` (the lightbox) with the cell's manifest index.
    """

    def __init__(self, state: GalleryState,
                 manifest_location: Union[str, Path],
                 dispatcher: EventDispatcher,
                 watcher: VisibilityWatcher,
                 loader: ImageLoader,
                 open_request: Callable[[int], None],
                 fetch: Callable[[str], Tuple[GalleryItem, ...]] = fetch_manifest,
                 layout: Optional[MasonryLayout] = None) -> None:
        self.state = state
        self.manifest_location = str(manifest_location)
        self.dispatcher = dispatcher
        self.watcher = watcher
        self.loader = loader
        self.open_request = open_request
        self.fetch = fetch
        self.layout = layout or MasonryLayout()

        self.cells: List[GridCell] = []
        self.message: Optional[str] = None
        self.outcome: Optional[RenderOutcome] = None

        dispatcher.subscribe(EventType.CELL_CLICKED, self.on_cell_clicked)
        dispatcher.subscribe(EventType.IMAGE_LOADED, self.on_image_loaded)
        dispatcher.subscribe(EventType.VISIBILITY_ENTERED, self.on_visibility_entered)

    # -------------------------------------------------------------------------
    # LOAD
    # -------------------------------------------------------------------------

    def load(self) -> RenderOutcome:
        try:
            items = self.fetch(self.manifest_location)
        except ManifestLoadError as exc:
            logger.error("Error loading gallery: %s", exc)
            self.message = ERROR_MESSAGE
            self.outcome = RenderOutcome.ERROR
            return self.outcome

        self.state.items = tuple(items)
        if not self.state.items:
            self.message = EMPTY_MESSAGE
            self.outcome = RenderOutcome.EMPTY
            return self.outcome

        self.render_grid()
        self.outcome = RenderOutcome.RENDERED
        return self.outcome

    def render_grid(self) -> None:
        self.cells = [self.create_cell(item, index)
                      for index, item in enumerate(self.state.items)]
        self.layout.arrange(self.cells)

        for cell in self.cells:
            if cell.eager:
                self.request_image(cell)
            else:
                self.watcher.notify_on_enter(cell, self._entered, margin=LAZY_MARGIN_PX)

    def create_cell(self, item: GalleryItem, index: int) -> GridCell:
        return GridCell(index=index, item=item, label=item.label(index),
                        eager=index < EAGER_COUNT)

    def _entered(self, cell: GridCell) -> None:
        self.dispatcher.dispatch(GalleryEvent.visibility_entered(cell.index))

    def request_image(self, cell: GridCell) -> None:
        if cell.requested_src is not None:
            return
        cell.requested_src = cell.item.src
        index = cell.index
        self.loader.load(
            cell.item.src,
            lambda width, height: self.dispatcher.dispatch(
                GalleryEvent.image_loaded(index, width, height)),
        )

    # -------------------------------------------------------------------------
    # EVENT HANDLERS
    # -------------------------------------------------------------------------

    def _cell(self, index: Optional[int]) -> Optional[GridCell]:
        if index is None or not 0 <= index < len(self.cells):
            return None
        return self.cells[index]

    def on_visibility_entered(self, event: GalleryEvent) -> None:
        cell = self._cell(event.index)
        if cell is not None:
            self.request_image(cell)

    def on_image_loaded(self, event: GalleryEvent) -> None:
        cell = self._cell(event.index)
        if cell is None:
            return
        if not cell.item.has_dimensions and event.width and event.height:
            cell.reserve(event.height / event.width)
            self.layout.arrange(self.cells)
        cell.status = CellStatus.LOADED

    def on_cell_clicked(self, event: GalleryEvent) -> None:
        if self._cell(event.index) is not None:
            self.open_request(event.index)
