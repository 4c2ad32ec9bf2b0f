"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

from dataclasses import dataclass
from typing import List, Optional

from .capabilities import ImageLoader
from .events import EventDispatcher, EventType, GalleryEvent, SwipeDirection
from .models import GalleryState


SWIPE_THRESHOLD = 50

KEY_CLOSE = "Escape"
KEY_PREV  = "ArrowLeft"
KEY_NEXT  = "ArrowRight"


def classify_swipe(start_x: float, end_x: float,
                   threshold: float = SWIPE_THRESHOLD) -> Optional[SwipeDirection]:
    """Net horizontal travel beyond ``threshold``; leftward travel means next."""
    diff = start_x - end_x
    if abs(diff) <= threshold:
        return None
    return SwipeDirection.LEFT if diff > 0 else SwipeDirection.RIGHT


@dataclass
class LightboxView:
    """What the overlay currently shows."""

    visible: bool = False
    aria_hidden: bool = True
    scroll_locked: bool = False
    image_src: str = ""
    image_alt: str = ""
    counter: str = ""


class LightboxController:
    """
    Closed / Open(i) state machine over ``state.items``.

    Navigation wraps in both directions. Every entry into Open(i) refreshes
    the view and prefetches the neighbours (i±1 mod N). Input arriving while
    closed is ignored.
    """

    def __init__(self, state: GalleryState, dispatcher: EventDispatcher,
                 loader: ImageLoader) -> None:
        self.state = state
        self.dispatcher = dispatcher
        self.loader = loader
        self.view = LightboxView()
        self._touch_start_x: Optional[float] = None

        dispatcher.subscribe(EventType.KEY_PRESSED, self.on_key_pressed)
        dispatcher.subscribe(EventType.SWIPE_DETECTED, self.on_swipe_detected)

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def current_index(self) -> Optional[int]:
        return self.state.current_index if self.state.is_open else None

    # -------------------------------------------------------------------------
    # TRANSITIONS
    # -------------------------------------------------------------------------

    def open(self, index: int) -> None:
        count = self.state.count
        if not 0 <= index < count:
            raise IndexError(f"Lightbox index {index} out of range for {count} item(s)")
        self.state.current_index = index
        self.state.is_open = True
        self.view.visible = True
        self.view.aria_hidden = False
        self.view.scroll_locked = True
        self._show()

    def close(self) -> None:
        if not self.state.is_open:
            return
        self.state.is_open = False
        self.view.visible = False
        self.view.aria_hidden = True
        self.view.scroll_locked = False
        self._touch_start_x = None

    def next(self) -> None:
        if not self.state.is_open:
            return
        self.state.current_index = (self.state.current_index + 1) % self.state.count
        self._show()

    def prev(self) -> None:
        if not self.state.is_open:
            return
        count = self.state.count
        self.state.current_index = (self.state.current_index - 1 + count) % count
        self._show()

    def neighbours(self) -> List[int]:
        index, count = self.state.current_index, self.state.count
        found: List[int] = []
        for candidate in ((index + 1) % count, (index - 1 + count) % count):
            if candidate != index and candidate not in found:
                found.append(candidate)
        return found

    def _show(self) -> None:
        index = self.state.current_index
        item = self.state.items[index]
        self.view.image_src = item.src
        self.view.image_alt = item.label(index)
        self.view.counter = f"{index + 1} / {self.state.count}"
        for neighbour in self.neighbours():
            self.loader.prefetch(self.state.items[neighbour].src)

    # -------------------------------------------------------------------------
    # INPUT
    # -------------------------------------------------------------------------

    def click_overlay(self, on_image: bool = False) -> None:
        """Background clicks close; clicks on the image itself do nothing."""
        if not on_image:
            self.close()

    def touch_start(self, x: float) -> None:
        if self.state.is_open:
            self._touch_start_x = x

    def touch_end(self, x: float) -> None:
        start, self._touch_start_x = self._touch_start_x, None
        if start is None or not self.state.is_open:
            return
        direction = classify_swipe(start, x)
        if direction is not None:
            self.dispatcher.dispatch(GalleryEvent.swipe_detected(direction))

    def on_key_pressed(self, event: GalleryEvent) -> None:
        if not self.state.is_open:
            return
        if event.key == KEY_CLOSE:
            self.close()
        elif event.key == KEY_PREV:
            self.prev()
        elif event.key == KEY_NEXT:
            self.next()

    def on_swipe_detected(self, event: GalleryEvent) -> None:
        if event.direction is SwipeDirection.LEFT:
            self.next()
        elif event.direction is SwipeDirection.RIGHT:
            self.prev()
