"""
Pytest configuration and shared fixtures for Dynamic Image tests.

This module provides shared test fixtures used across multiple test
modules: generated test images, font files, and a recorder that replaces
the glyph rasterizer so tests can count draw calls.
"""

import glob
import os
from pathlib import Path

import pytest
from PIL import Image

# Common TrueType locations on Linux, macOS and Windows
FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]


def _find_truetype_font():
    for path in FONT_CANDIDATES:
        if os.path.isfile(path):
            return path
    found = glob.glob("/usr/share/fonts/**/*.ttf", recursive=True)
    return found[0] if found else None


@pytest.fixture
def image_dir(tmp_path):
    """
    Provide a directory with generated test images.

    Contents:
        test.gif, test.jpg, test.png: 128x128 images of each supported type
        test_small.png: 32x32 PNG
        test.tif: TIFF image (unsupported type)
        empty.gif: zero-byte file
        broken.gif: GIF signature followed by garbage
        truncated.png: first bytes of a valid PNG
    """
    directory = tmp_path / "testdata"
    directory.mkdir()

    Image.new("RGB", (128, 128), (200, 30, 30)).save(directory / "test.gif", format="GIF")
    Image.new("RGB", (128, 128), (30, 200, 30)).save(directory / "test.jpg", format="JPEG")
    Image.new("RGBA", (128, 128), (30, 30, 200, 255)).save(directory / "test.png", format="PNG")
    Image.new("RGBA", (32, 32), (250, 250, 0, 255)).save(directory / "test_small.png", format="PNG")
    Image.new("RGB", (16, 16), (0, 0, 0)).save(directory / "test.tif", format="TIFF")

    (directory / "empty.gif").write_bytes(b"")
    (directory / "broken.gif").write_bytes(b"GIF89a" + b"\x00\x01garbage" * 4)

    png_bytes = (directory / "test.png").read_bytes()
    (directory / "truncated.png").write_bytes(png_bytes[: len(png_bytes) // 2])

    return directory


@pytest.fixture
def cache_dir(tmp_path):
    """Provide an empty cache directory."""
    directory = tmp_path / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_font(tmp_path):
    """
    Provide a readable file that is not a real font.

    Good enough for readability checks; Pillow refuses to load it.
    """
    path = tmp_path / "fake.ttf"
    path.write_bytes(b"not really a font")
    return path


@pytest.fixture
def truetype_font():
    """Provide the path of an installed TrueType font, skipping if none exists."""
    path = _find_truetype_font()
    if path is None:
        pytest.skip("No TrueType font installed")
    return Path(path)


@pytest.fixture
def draw_calls(monkeypatch):
    """
    Replace the glyph rasterizer with a recorder.

    Returns:
        List that receives one dict per draw call with keys
        'x', 'y', 'text', 'fill', 'size' and 'font'
    """
    calls = []

    def fake_draw_text(image, font_path, size, fill, x, y, text):
        calls.append({
            "x": x,
            "y": y,
            "text": text,
            "fill": fill,
            "size": size,
            "font": font_path,
        })
        return (x, y, x, y)

    monkeypatch.setattr("DI_Libs.TextLib.text.draw_text", fake_draw_text)
    return calls
