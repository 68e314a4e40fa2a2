"""
Single import point for Pillow.

Every module in DI_Libs reaches Pillow through here: `Image` for decoding,
encoding and compositing, `ImageDraw` and `ImageFont` for text overlays, and
`UnidentifiedImageError`, which Pillow raises when it cannot identify a
file's content. A missing Pillow install fails at import with a hint.
"""
from importlib import import_module
from types import ModuleType


def _require(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError(
            f"pillow (PIL) is required for {name}: install with 'pip install Pillow'"
        ) from exc


Image = _require("PIL.Image")
ImageDraw = _require("PIL.ImageDraw")
ImageFont = _require("PIL.ImageFont")

UnidentifiedImageError = Image.UnidentifiedImageError

# Pillow image class, for isinstance checks and annotations
ImageClass = Image.Image
