import pytest

from ptphotogallery.events import EventDispatcher, GalleryEvent, SwipeDirection
from ptphotogallery.lightbox import LightboxController, classify_swipe
from ptphotogallery.models import GalleryItem, GalleryState

from tests.conftest import FakeLoader


def make_lightbox(count):
    state = GalleryState(items=tuple(GalleryItem(f"{i}.jpg", f"n{i}") for i in range(count)))
    dispatcher = EventDispatcher()
    loader = FakeLoader()
    return LightboxController(state, dispatcher, loader), dispatcher, loader


@pytest.mark.parametrize("count", [1, 2, 5])
def test_next_n_times_returns_to_start(count):
    lightbox, _, _ = make_lightbox(count)
    lightbox.open(0)
    for _ in range(count):
        lightbox.next()
    assert lightbox.current_index == 0


def test_prev_from_first_wraps_to_last():
    lightbox, _, _ = make_lightbox(5)
    lightbox.open(0)
    lightbox.prev()
    assert lightbox.current_index == 4
    assert lightbox.view.counter == "5 / 5"


def test_open_and_close_toggle_overlay_flags():
    lightbox, _, _ = make_lightbox(3)

    lightbox.open(1)
    assert lightbox.view.visible and lightbox.view.scroll_locked
    assert lightbox.view.aria_hidden is False
    assert lightbox.view.image_src == "1.jpg"
    assert lightbox.view.image_alt == "n1"

    lightbox.close()
    assert not lightbox.is_open
    assert lightbox.view.aria_hidden is True
    assert not lightbox.view.scroll_locked


def test_neighbours_are_prefetched_on_every_transition():
    lightbox, _, loader = make_lightbox(4)

    lightbox.open(0)
    assert loader.prefetched == ["1.jpg", "3.jpg"]

    lightbox.next()
    assert loader.prefetched[2:] == ["2.jpg", "0.jpg"]
    assert "1.jpg" not in loader.requested


def test_single_item_prefetches_nothing():
    lightbox, _, loader = make_lightbox(1)
    lightbox.open(0)
    assert loader.prefetched == []
    assert lightbox.view.counter == "1 / 1"


@pytest.mark.parametrize("start,end,expected", [
    (200, 151, None),
    (200, 149, SwipeDirection.LEFT),
    (100, 149, None),
    (100, 151, SwipeDirection.RIGHT),
    (100, 150, None),
])
def test_classify_swipe_threshold(start, end, expected):
    assert classify_swipe(start, end) is expected


def test_swipes_navigate():
    lightbox, _, _ = make_lightbox(3)
    lightbox.open(1)

    lightbox.touch_start(300)
    lightbox.touch_end(249)
    assert lightbox.current_index == 2

    lightbox.touch_start(300)
    lightbox.touch_end(351)
    assert lightbox.current_index == 1

    lightbox.touch_start(300)
    lightbox.touch_end(251)
    assert lightbox.current_index == 1


def test_keyboard_navigation_and_escape():
    lightbox, dispatcher, _ = make_lightbox(3)
    lightbox.open(0)

    dispatcher.dispatch(GalleryEvent.key_pressed("ArrowRight"))
    assert lightbox.current_index == 1
    dispatcher.dispatch(GalleryEvent.key_pressed("ArrowLeft"))
    dispatcher.dispatch(GalleryEvent.key_pressed("ArrowLeft"))
    assert lightbox.current_index == 2
    dispatcher.dispatch(GalleryEvent.key_pressed("Enter"))
    assert lightbox.current_index == 2

    dispatcher.dispatch(GalleryEvent.key_pressed("Escape"))
    assert not lightbox.is_open


def test_input_is_ignored_while_closed():
    lightbox, dispatcher, loader = make_lightbox(3)

    dispatcher.dispatch(GalleryEvent.key_pressed("ArrowRight"))
    dispatcher.dispatch(GalleryEvent.swipe_detected(SwipeDirection.LEFT))
    lightbox.next()
    lightbox.prev()
    lightbox.touch_start(300)
    lightbox.touch_end(0)

    assert not lightbox.is_open
    assert lightbox.state.current_index == 0
    assert loader.prefetched == []


def test_overlay_click_closes_only_on_background():
    lightbox, _, _ = make_lightbox(2)
    lightbox.open(0)

    lightbox.click_overlay(on_image=True)
    assert lightbox.is_open

    lightbox.click_overlay()
    assert not lightbox.is_open


def test_open_rejects_out_of_range_index():
    lightbox, _, _ = make_lightbox(2)
    with pytest.raises(IndexError):
        lightbox.open(2)
    assert not lightbox.is_open
