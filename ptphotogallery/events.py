"""
    Copyright (c) 2025 Bc. Dominik Sabota, VUT FIT Brno

    ptphotogallery - Static photo gallery manifest builder and viewer model

    ptphotogallery is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.
    See <https://www.gnu.org/licenses/> for details.
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional


class EventType(Enum):
    CELL_CLICKED       = "cellClicked"
    KEY_PRESSED        = "keyPressed"
    SWIPE_DETECTED     = "swipeDetected"
    IMAGE_LOADED       = "imageLoaded"
    VISIBILITY_ENTERED = "visibilityEntered"


class SwipeDirection(Enum):
    LEFT  = "left"     # finger moved right-to-left → next image
    RIGHT = "right"    # finger moved left-to-right → previous image


@dataclass(frozen=True)
class GalleryEvent:
    type: EventType
    index: Optional[int] = None
    key: Optional[str] = None
    direction: Optional[SwipeDirection] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def cell_clicked(cls, index: int) -> "GalleryEvent":
        return cls(EventType.CELL_CLICKED, index=index)

    @classmethod
    def key_pressed(cls, key: str) -> "GalleryEvent":
        return cls(EventType.KEY_PRESSED, key=key)

    @classmethod
    def swipe_detected(cls, direction: SwipeDirection) -> "GalleryEvent":
        return cls(EventType.SWIPE_DETECTED, direction=direction)

    @classmethod
    def image_loaded(cls, index: int, width: int, height: int) -> "GalleryEvent":
        return cls(EventType.IMAGE_LOADED, index=index, width=width, height=height)

    @classmethod
    def visibility_entered(cls, index: int) -> "GalleryEvent":
        return cls(EventType.VISIBILITY_ENTERED, index=index)


Handler = Callable[[GalleryEvent], None]


class EventDispatcher:
    """
    Synchronous, single-threaded event fan-out.

    Handlers run in subscription order inside ``dispatch``; an event raised
    from a handler is dispatched in full before ``dispatch`` returns.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventType, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def dispatch(self, event: GalleryEvent) -> int:
        handlers = list(self._handlers.get(event.type, ()))
        for handler in handlers:
            handler(event)
        return len(handlers)
