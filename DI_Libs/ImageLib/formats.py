"""
Format detection, decoding and encoding for Dynamic Image.

The content type of a file is sniffed by Pillow from its bytes, not from its
name. Only when Pillow cannot identify the content at all (an empty file, a
mangled header) does the extension decide, so that a broken ``.gif`` is
reported as a decode failure rather than an unsupported type.

Functions:
    detect_mime_type: Sniff the MIME type of an image file
    is_supported_mime_type: Check a MIME type against GIF/JPEG/PNG
    decode_image: Decode a file into an RGBA Pillow image
    encode_image: Encode a Pillow image for a MIME type
"""

import io
import mimetypes
from pathlib import Path
from typing import Optional

from DI_Libs.constants import (
    CANVAS_MODE,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_OUTPUT_MIME_TYPE,
    MIME_JPEG,
    PILLOW_FORMATS,
    SUPPORTED_MIME_TYPES,
    UNKNOWN_MIME_TYPE,
)
from DI_Libs.exceptions import DecodeError, UnsupportedFormatError
from DI_Libs.pillow_compat import Image, ImageClass, UnidentifiedImageError


def detect_mime_type(path: Path) -> str:
    """
    Sniff the MIME type of an image file from its content.

    Args:
        path: Path to the file

    Returns:
        MIME type string (e.g. 'image/png'); 'application/octet-stream'
        when neither the content nor the extension identifies a type

    Raises:
        DecodeError: If the file cannot be opened
    """
    path = Path(path)
    try:
        with Image.open(path) as probe:
            mime_type = Image.MIME.get(probe.format or "")
    except UnidentifiedImageError:
        mime_type = None
    except (OSError, EOFError, SyntaxError, ValueError) as e:
        raise DecodeError(f"Couldn't read image at {path}: {e}") from e

    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(path.name)

    return mime_type or UNKNOWN_MIME_TYPE


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in SUPPORTED_MIME_TYPES


def require_supported_mime_type(mime_type: str) -> str:
    """
    Raises:
        UnsupportedFormatError: If mime_type is not GIF, JPEG or PNG
    """
    if not is_supported_mime_type(mime_type):
        raise UnsupportedFormatError(f"Image type {mime_type} not supported")
    return mime_type


def decode_image(path: Path, mime_type: str) -> ImageClass:
    """
    Decode an image file into an RGBA Pillow image.

    The whole file is decoded immediately so truncated data fails here and
    not on first use.

    Args:
        path: Path to the image file
        mime_type: Expected MIME type (must be supported)

    Returns:
        Decoded RGBA PIL Image

    Raises:
        UnsupportedFormatError: If mime_type is not supported
        DecodeError: If the file is missing, empty or corrupt
    """
    require_supported_mime_type(mime_type)
    path = Path(path)

    try:
        with Image.open(path, formats=[PILLOW_FORMATS[mime_type]]) as img:
            img.load()
            # Convert to RGBA for consistency
            return img.convert(CANVAS_MODE)
    except (OSError, EOFError, SyntaxError, ValueError) as e:
        raise DecodeError(f"Couldn't read image at {path}") from e


def encode_image(image: ImageClass, mime_type: Optional[str] = None) -> bytes:
    """
    Encode a Pillow image for the given MIME type.

    Args:
        image: PIL Image to encode
        mime_type: Target MIME type (default PNG when None)

    Returns:
        Encoded image bytes

    Raises:
        UnsupportedFormatError: If mime_type is not supported
    """
    mime_type = require_supported_mime_type(mime_type or DEFAULT_OUTPUT_MIME_TYPE)

    save_kwargs = {"format": PILLOW_FORMATS[mime_type]}
    if mime_type == MIME_JPEG:
        # JPEG has no alpha channel
        image = image.convert("RGB")
        save_kwargs["quality"] = DEFAULT_JPEG_QUALITY

    buffer = io.BytesIO()
    image.save(buffer, **save_kwargs)
    return buffer.getvalue()
