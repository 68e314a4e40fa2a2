"""
TextLib - Text overlays

This module provides the plain text renderer and the decorators that
stack effects such as borders and drop shadows on top of it.
"""

from DI_Libs.TextLib.text import TextRenderer, Text, draw_text, is_readable_font
from DI_Libs.TextLib.decorators import TextDecorator, BorderDecorator, ShadowDecorator

__all__ = [
    "TextRenderer",
    "Text",
    "draw_text",
    "is_readable_font",
    "TextDecorator",
    "BorderDecorator",
    "ShadowDecorator",
]
