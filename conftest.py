"""
Shared pytest fixtures: a photo factory writing small JPEGs with Pillow.
"""

import pytest
from PIL import Image

EXIF_IFD_POINTER = 0x8769
DATETIME_ORIGINAL = 0x9003


@pytest.fixture
def make_photo(tmp_path):
    """Create a JPEG in tmp_path, optionally carrying an EXIF DateTimeOriginal."""
    def _make(name, capture_time=None, directory=None):
        path = (directory or tmp_path) / name
        img = Image.new("RGB", (8, 8), "white")
        if capture_time is None:
            img.save(path, "JPEG")
        else:
            exif = Image.Exif()
            exif[EXIF_IFD_POINTER] = {DATETIME_ORIGINAL: capture_time}
            img.save(path, "JPEG", exif=exif)
        return path
    return _make
