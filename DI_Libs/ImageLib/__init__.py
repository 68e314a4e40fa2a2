"""
ImageLib - Image resource model

This module provides the Canvas resource type with disk-backed caching
and layer compositing, the Color value type, and format handling.
"""

from DI_Libs.ImageLib.color import Color, RgbaColor
from DI_Libs.ImageLib.bitmap import BitmapHandle
from DI_Libs.ImageLib.formats import (
    detect_mime_type,
    is_supported_mime_type,
    decode_image,
    encode_image,
)
from DI_Libs.ImageLib.image_cache import ImageCache
from DI_Libs.ImageLib.canvas import Canvas

__all__ = [
    "Color",
    "RgbaColor",
    "BitmapHandle",
    "detect_mime_type",
    "is_supported_mime_type",
    "decode_image",
    "encode_image",
    "ImageCache",
    "Canvas",
]
