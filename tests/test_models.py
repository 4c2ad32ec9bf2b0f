import pytest

from ptphotogallery.models import GalleryItem, GalleryState, ManifestLoadError, parse_manifest


def test_parse_manifest_accepts_wire_schema():
    items = parse_manifest([
        {"src": "a.jpg", "alt": "a", "w": 400, "h": 200},
        {"src": "b.jpg"},
    ])

    assert items == (GalleryItem("a.jpg", "a", 400, 200), GalleryItem("b.jpg", ""))
    assert items[0].aspect_ratio == 0.5
    assert items[1].aspect_ratio is None


@pytest.mark.parametrize("payload", [
    {"src": "a.jpg"},
    [{"alt": "no src"}],
    ["a.jpg"],
    [{"src": "a.jpg", "alt": 3}],
])
def test_parse_manifest_rejects_malformed_payloads(payload):
    with pytest.raises(ManifestLoadError):
        parse_manifest(payload)


def test_half_specified_dimensions_are_dropped():
    item = GalleryItem.from_dict({"src": "a.jpg", "w": 400, "h": None})
    assert item.w is None and item.h is None


def test_item_requires_both_dimensions():
    with pytest.raises(ValueError):
        GalleryItem("a.jpg", "a", w=10)


def test_positional_label_fallback():
    assert GalleryItem("a.jpg").label(4) == "Image 5"
    assert GalleryItem("a.jpg", "Dune").label(4) == "Dune"


def test_closed_state_has_no_current_item():
    state = GalleryState(items=(GalleryItem("a.jpg"),), current_index=0)
    assert state.current_item is None
    state.is_open = True
    assert state.current_item.src == "a.jpg"
