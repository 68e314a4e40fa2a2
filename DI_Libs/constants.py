"""
Constants and configuration values for Dynamic Image.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the library.
"""

# Color limits (alpha follows the 7-bit convention: 0 = opaque, 127 = transparent)
COLOR_MIN = 0
COLOR_MAX = 255
ALPHA_MIN = 0
ALPHA_MAX = 127
ALPHA_OPAQUE = ALPHA_MIN
ALPHA_TRANSPARENT = ALPHA_MAX

COLOR_RANGE_MESSAGE = (
    "Color is expected to be an integer value between 0 and 255 "
    "or a hexadecimal value between 0x00 and 0xFF"
)
ALPHA_RANGE_MESSAGE = "Alpha is expected to be an integer value between 0 and 127"

# Supported image types
MIME_GIF = "image/gif"
MIME_JPEG = "image/jpeg"
MIME_PNG = "image/png"
SUPPORTED_MIME_TYPES = (MIME_GIF, MIME_JPEG, MIME_PNG)
UNKNOWN_MIME_TYPE = "application/octet-stream"

# Pillow format names used to encode each supported type
PILLOW_FORMATS = {
    MIME_GIF: "GIF",
    MIME_JPEG: "JPEG",
    MIME_PNG: "PNG",
}

# Output defaults
DEFAULT_OUTPUT_MIME_TYPE = MIME_PNG
DEFAULT_JPEG_QUALITY = 90
CANVAS_MODE = "RGBA"
BLANK_FILL = (0, 0, 0, 0)

# Merge strategies
MERGE_SCALE_DST = "scale_dst"
MERGE_SCALE_DST_NO_UPSCALE = "scale_dst_no_upscale"
MERGE_SCALE_SRC = "scale_src"
MERGE_STRATEGIES = (MERGE_SCALE_DST, MERGE_SCALE_DST_NO_UPSCALE, MERGE_SCALE_SRC)
DEFAULT_MERGE_STRATEGY = MERGE_SCALE_SRC

# Text defaults
DEFAULT_FONT_SIZE = 12.0
TEXT_ANCHOR = "ls"  # left edge, baseline

# Border passes, column by column around the center
BORDER_OFFSETS = tuple(
    (dx, dy)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    if (dx, dy) != (0, 0)
)

# Banner job field names
FIELD_BASE_IMAGE = "base_image"
FIELD_WIDTH = "width"
FIELD_HEIGHT = "height"
FIELD_CACHE_DIR = "cache_dir"
FIELD_LAYERS = "layers"
FIELD_TEXTS = "texts"
FIELD_OUTPUT = "output"
