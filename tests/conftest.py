import os
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest
from PIL import Image

from ptphotogallery.capabilities import ImageLoader


def write_image(path: Path, size=(40, 20), fmt=None, mtime_ms=None, exif=None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", size, (120, 80, 40))
    kwargs = {}
    if exif is not None:
        kwargs["exif"] = exif
    img.save(path, fmt, **kwargs)
    if mtime_ms is not None:
        set_mtime(path, mtime_ms)
    return path


def set_mtime(path: Path, mtime_ms: int) -> None:
    ns = mtime_ms * 1_000_000
    os.utime(path, ns=(ns, ns))


class FakeLoader(ImageLoader):
    """Records load requests; completes them only when told to."""

    def __init__(self, sizes: Dict[str, Tuple[int, int]] = None) -> None:
        self.sizes = sizes or {}
        self.requested: List[str] = []
        self.prefetched: List[str] = []
        self._pending: Dict[str, Callable[[int, int], None]] = {}

    def load(self, src, on_load):
        self.requested.append(src)
        self._pending[src] = on_load

    def prefetch(self, src):
        self.prefetched.append(src)

    def complete(self, src):
        on_load = self._pending.pop(src)
        on_load(*self.sizes.get(src, (100, 100)))


@pytest.fixture
def image_factory():
    return write_image
