"""
Text decorators for Dynamic Image.

Decorators wrap a TextRenderer (a plain Text or another decorator) and add
effects to ``insert_text`` or new operations of their own. A chain of
decorators behaves like one renderer:

- ``capabilities()`` / ``provides_method()`` report the union of every
  layer's operations, however deep the chain is.
- The core text operations are delegated explicitly. Any other operation is
  forwarded down the chain when some layer provides it, so a border color
  can be set through unrelated decorators stacked on top of the border.
- Asking for an operation that no layer provides raises CapabilityError.

Example:
    >>> text = Text(canvas).set_text_font(font).set_text_color(white)
    >>> chain = ShadowDecorator(BorderDecorator(text), shadow_color=grey)
    >>> chain.provides_method("set_border_color")
    True
    >>> chain.set_border_color(black).insert_text(10, 30, "Hello")

Classes:
    TextDecorator: Base class forwarding to a wrapped renderer
    BorderDecorator: Outlines text with a one pixel border
    ShadowDecorator: Draws a drop shadow under text
"""

import functools
from typing import Any, FrozenSet, Optional, Tuple

from DI_Libs.constants import ALPHA_OPAQUE, BORDER_OFFSETS
from DI_Libs.exceptions import CapabilityError, RenderError, TypeMismatchError
from DI_Libs.ImageLib.canvas import Canvas
from DI_Libs.ImageLib.color import Color
from DI_Libs.TextLib.text import FontPath, TextRenderer


class TextDecorator(TextRenderer):
    """Base class for decorators. Delegates every operation to the wrapped renderer."""

    def __init__(self, text: TextRenderer):
        if not isinstance(text, TextRenderer):
            raise TypeMismatchError(f"Expected TextRenderer to decorate, got {type(text).__name__}")
        self._text = text

    def get_wrapped(self) -> TextRenderer:
        return self._text

    def capabilities(self) -> FrozenSet[str]:
        own = frozenset(type(self).CAPABILITIES)
        probe = getattr(self._text, "capabilities", None)
        if callable(probe):
            return own | frozenset(probe())
        return own

    def provides_method(self, name: str) -> bool:
        if name in type(self).CAPABILITIES:
            return True
        probe = getattr(self._text, "provides_method", None)
        if callable(probe):
            return bool(probe(name))
        return False

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on the decorator itself
        if name.startswith("__") or name == "_text":
            raise AttributeError(name)

        text = self.__dict__.get("_text")
        if text is None or not self.provides_method(name):
            raise CapabilityError(
                f"Failed to call {name}(): not provided by {type(self).__name__} "
                f"or any decorated object"
            )

        target = getattr(text, name)
        if not callable(target):
            return target

        @functools.wraps(target)
        def forward(*args, **kwargs):
            result = target(*args, **kwargs)
            # Keep fluent calls on the outermost decorator
            return self if result is text else result

        return forward

    def set_image(self, image: Optional[Canvas]) -> "TextDecorator":
        self._text.set_image(image)
        return self

    def get_image(self) -> Optional[Canvas]:
        return self._text.get_image()

    def set_text_color(self, color: Optional[Color]) -> "TextDecorator":
        self._text.set_text_color(color)
        return self

    def get_text_color(self) -> Optional[Color]:
        return self._text.get_text_color()

    def set_text_font(self, path: FontPath) -> "TextDecorator":
        self._text.set_text_font(path)
        return self

    def get_text_font(self) -> Optional[FontPath]:
        return self._text.get_text_font()

    def set_text_size(self, size: float) -> "TextDecorator":
        self._text.set_text_size(size)
        return self

    def get_text_size(self) -> float:
        return self._text.get_text_size()

    def insert_text(self, x: int, y: int, text: str) -> "TextDecorator":
        self._text.insert_text(x, y, text)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"


def _require_color(color: Any, what: str) -> Color:
    if not isinstance(color, Color):
        raise TypeMismatchError(f"{what} must be a Color, got {type(color).__name__}")
    return color


class BorderDecorator(TextDecorator):
    """
    Outlines text with a one pixel border.

    The text is drawn eight times in the border color, once at every
    neighbouring offset of (x, y), and then once at (x, y) in the text
    color. The border passes are always drawn fully opaque.
    """

    CAPABILITIES = TextDecorator.CAPABILITIES | frozenset({
        "set_border_color",
        "get_border_color",
    })

    def __init__(self, text: TextRenderer, border_color: Optional[Color] = None):
        super().__init__(text)
        self._border_color: Optional[Color] = None
        if border_color is not None:
            self.set_border_color(border_color)

    def set_border_color(self, color: Color) -> "BorderDecorator":
        self._border_color = _require_color(color, "Border color")
        return self

    def get_border_color(self) -> Optional[Color]:
        return self._border_color

    def insert_text(self, x: int, y: int, text: str) -> "BorderDecorator":
        """
        Draw outlined text with its baseline starting at (x, y).

        Raises:
            RenderError: If no border color is set, or the wrapped renderer
                cannot draw
        """
        border_color = self._border_color
        if border_color is None:
            raise RenderError("Attempt to render text border without setting a color")

        text_color = self._text.get_text_color()
        if text_color is None:
            raise RenderError("Attempt to render text without setting a color")
        border_alpha = border_color.get_alpha()

        border_color.set_alpha(ALPHA_OPAQUE)
        self._text.set_text_color(border_color)
        try:
            for dx, dy in BORDER_OFFSETS:
                self._text.insert_text(x + dx, y + dy, text)
        finally:
            border_color.set_alpha(border_alpha)
            self._text.set_text_color(text_color)

        self._text.insert_text(x, y, text)
        return self


class ShadowDecorator(TextDecorator):
    """
    Draws a drop shadow under text.

    The shadow is the text drawn in the shadow color (its alpha is kept) at
    (x + dx, y + dy), followed by the text itself at (x, y).
    """

    CAPABILITIES = TextDecorator.CAPABILITIES | frozenset({
        "set_shadow_color",
        "get_shadow_color",
        "set_shadow_offset",
        "get_shadow_offset",
    })

    def __init__(
        self,
        text: TextRenderer,
        shadow_color: Optional[Color] = None,
        offset: Tuple[int, int] = (1, 1),
    ):
        super().__init__(text)
        self._shadow_color: Optional[Color] = None
        self._offset = (0, 0)
        if shadow_color is not None:
            self.set_shadow_color(shadow_color)
        self.set_shadow_offset(*offset)

    def set_shadow_color(self, color: Color) -> "ShadowDecorator":
        self._shadow_color = _require_color(color, "Shadow color")
        return self

    def get_shadow_color(self) -> Optional[Color]:
        return self._shadow_color

    def set_shadow_offset(self, dx: int, dy: int) -> "ShadowDecorator":
        for value in (dx, dy):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeMismatchError(f"Shadow offset must be an integer, got {type(value).__name__}")
        self._offset = (dx, dy)
        return self

    def get_shadow_offset(self) -> Tuple[int, int]:
        return self._offset

    def insert_text(self, x: int, y: int, text: str) -> "ShadowDecorator":
        """
        Draw text with a drop shadow.

        Raises:
            RenderError: If no shadow color is set, or the wrapped renderer
                cannot draw
        """
        if self._shadow_color is None:
            raise RenderError("Attempt to render text shadow without setting a color")

        text_color = self._text.get_text_color()
        if text_color is None:
            raise RenderError("Attempt to render text without setting a color")
        dx, dy = self._offset

        self._text.set_text_color(self._shadow_color)
        try:
            self._text.insert_text(x + dx, y + dy, text)
        finally:
            self._text.set_text_color(text_color)

        self._text.insert_text(x, y, text)
        return self
