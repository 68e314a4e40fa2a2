"""
Text overlay rendering for Dynamic Image.

This module defines the text capability surface shared by plain text
renderers and decorators, and the plain renderer that draws text onto a
Canvas with a TrueType font.

Example:
    >>> canvas = Canvas.create(200, 50)
    >>> text = Text(canvas)
    >>> text.set_text_font("fonts/vera.ttf").set_text_size(14.0)
    >>> text.set_text_color(Color(255, 255, 255))
    >>> text.insert_text(10, 30, "Hello")

Classes:
    TextRenderer: Abstract text capability with capability probing
    Text: Draws text onto a Canvas

Functions:
    is_readable_font: Check that a font file can be read
    draw_text: Rasterize text onto a Pillow image
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union

from DI_Libs.constants import DEFAULT_FONT_SIZE, TEXT_ANCHOR
from DI_Libs.exceptions import RenderError, TypeMismatchError, ValidationError
from DI_Libs.ImageLib.canvas import Canvas
from DI_Libs.ImageLib.color import Color, RgbaColor
from DI_Libs.pillow_compat import ImageClass, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

FontPath = Union[str, Path]


def is_readable_font(path: Optional[FontPath]) -> bool:
    """Return True if ``path`` names a regular file this process can read."""
    if path is None:
        return False
    path = Path(path)
    return path.is_file() and os.access(path, os.R_OK)


def draw_text(
    image: ImageClass,
    font_path: FontPath,
    size: float,
    fill: RgbaColor,
    x: int,
    y: int,
    text: str,
) -> Tuple[int, int, int, int]:
    """
    Rasterize text onto an image in place.

    (x, y) is the left end of the text baseline.

    Args:
        image: RGBA PIL Image to draw on
        font_path: Path to a TrueType font
        size: Font size in points
        fill: (R, G, B, A) fill with 8-bit alpha
        x: Baseline start x
        y: Baseline y
        text: Text to draw

    Returns:
        Bounding box (left, top, right, bottom) of the drawn text

    Raises:
        OSError: If the font cannot be loaded
    """
    font = ImageFont.truetype(str(font_path), size)
    draw = ImageDraw.Draw(image)
    if not text:
        return (x, y, x, y)
    draw.text((x, y), text, font=font, fill=fill, anchor=TEXT_ANCHOR)
    return draw.textbbox((x, y), text, font=font, anchor=TEXT_ANCHOR)


class TextRenderer(ABC):
    """
    Text capability surface.

    Every renderer declares the operations it implements itself in
    ``CAPABILITIES``. ``capabilities()`` reports everything the renderer can
    do, which for decorators includes whatever the wrapped renderer can do.
    """

    CAPABILITIES: FrozenSet[str] = frozenset({
        "set_image",
        "get_image",
        "set_text_color",
        "get_text_color",
        "set_text_font",
        "get_text_font",
        "set_text_size",
        "get_text_size",
        "insert_text",
    })

    def capabilities(self) -> FrozenSet[str]:
        return frozenset(type(self).CAPABILITIES)

    def provides_method(self, name: str) -> bool:
        """Return True if the operation ``name`` is available on this renderer."""
        return name in self.capabilities()

    @abstractmethod
    def set_image(self, image: Optional[Canvas]) -> "TextRenderer":
        ...

    @abstractmethod
    def get_image(self) -> Optional[Canvas]:
        ...

    @abstractmethod
    def set_text_color(self, color: Optional[Color]) -> "TextRenderer":
        ...

    @abstractmethod
    def get_text_color(self) -> Optional[Color]:
        ...

    @abstractmethod
    def set_text_font(self, path: FontPath) -> "TextRenderer":
        ...

    @abstractmethod
    def get_text_font(self) -> Optional[FontPath]:
        ...

    @abstractmethod
    def set_text_size(self, size: float) -> "TextRenderer":
        ...

    @abstractmethod
    def get_text_size(self) -> float:
        ...

    @abstractmethod
    def insert_text(self, x: int, y: int, text: str) -> "TextRenderer":
        ...


class Text(TextRenderer):
    """Draws text onto a Canvas using a TrueType font and a Color."""

    def __init__(self, image: Optional[Canvas] = None):
        self._image = image
        self._color: Optional[Color] = None
        self._font: Optional[FontPath] = None
        self._size: float = DEFAULT_FONT_SIZE

    def set_image(self, image: Optional[Canvas]) -> "Text":
        self._image = image
        return self

    def get_image(self) -> Optional[Canvas]:
        return self._image

    def set_text_color(self, color: Optional[Color]) -> "Text":
        """
        Raises:
            TypeMismatchError: If color is neither a Color nor None
        """
        if color is not None and not isinstance(color, Color):
            raise TypeMismatchError(f"Text color must be a Color, got {type(color).__name__}")
        self._color = color
        return self

    def get_text_color(self) -> Optional[Color]:
        return self._color

    def set_text_font(self, path: FontPath) -> "Text":
        """
        Select the font file used for rendering.

        Raises:
            ValidationError: If the font file cannot be read
        """
        if not is_readable_font(path):
            raise ValidationError(f"Unable to load font file at {path}")
        self._font = path
        return self

    def get_text_font(self) -> Optional[FontPath]:
        return self._font

    def set_text_size(self, size: float) -> "Text":
        """
        Raises:
            TypeMismatchError: If size is not a number
            ValidationError: If size is not positive
        """
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            raise TypeMismatchError(f"Text size must be a number, got {type(size).__name__}")
        if size <= 0:
            raise ValidationError(f"Text size must be > 0, got {size}")
        self._size = size
        return self

    def get_text_size(self) -> float:
        return self._size

    def insert_text(self, x: int, y: int, text: str) -> "Text":
        """
        Draw text with its baseline starting at (x, y).

        Raises:
            RenderError: If no valid canvas is bound, no color or font is
                set, or the font file cannot be read anymore
        """
        if self._image is None or not self._image.is_valid():
            raise RenderError("Attempt to render text onto invalid image resource")

        if self._color is None:
            raise RenderError("Attempt to render text without setting a color")

        if self._font is None:
            raise RenderError("No font file selected for rendering text overlay")

        # The file may have gone away since set_text_font()
        if not is_readable_font(self._font):
            raise RenderError(f"Failed to read font file '{self._font}'")

        try:
            draw_text(
                self._image.require_image(),
                self._font,
                self._size,
                self._color.to_rgba(),
                x,
                y,
                text,
            )
        except OSError as e:
            raise RenderError(f"Failed to read font file '{self._font}'") from e

        return self
