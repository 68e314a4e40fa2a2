"""
Canvas: the image resource at the core of Dynamic Image.

A Canvas owns exactly one bitmap handle together with the metadata captured
when it was acquired (MIME type, modification time, source path and cache
directory). Canvases are acquired either by decoding a file, optionally
through a disk cache, or by allocating a blank RGBA bitmap. They are mutated
in place by merge operations and by text insertion, and emitted with
``render()``.

Example:
    >>> background = Canvas.from_path("banner.png", cache_dir="/tmp/cache")
    >>> logo = Canvas.from_path("logo.png")
    >>> background.merge(logo, 10, 10, MERGE_SCALE_DST_NO_UPSCALE)
    >>> background.merge_alpha(logo, 200, 10, alpha=64)
    >>> background.render()

Classes:
    Canvas: Owned bitmap plus acquisition metadata
"""

import logging
import sys
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Tuple, Union

from DI_Libs.constants import (
    ALPHA_MAX,
    ALPHA_OPAQUE,
    BLANK_FILL,
    CANVAS_MODE,
    DEFAULT_MERGE_STRATEGY,
    MERGE_SCALE_DST_NO_UPSCALE,
    MERGE_SCALE_SRC,
    MERGE_STRATEGIES,
)
from DI_Libs.exceptions import (
    DecodeError,
    InvalidResourceError,
    TypeMismatchError,
    UnsupportedFormatError,
    ValidationError,
)
from DI_Libs.ImageLib.bitmap import BitmapHandle
from DI_Libs.ImageLib.color import Color
from DI_Libs.ImageLib.formats import (
    decode_image,
    detect_mime_type,
    encode_image,
    require_supported_mime_type,
)
from DI_Libs.ImageLib.image_cache import ImageCache, file_mtime
from DI_Libs.pillow_compat import Image, ImageClass

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

MERGE_INVALID_MESSAGE = "Attempt to merge image data using an invalid image resource."
RENDER_INVALID_MESSAGE = "Attempt to render invalid resource as image."
QUERY_INVALID_MESSAGE = "Attempt to read dimensions of invalid image resource."


def _decode_file(path: Path) -> Tuple[ImageClass, str]:
    mime_type = require_supported_mime_type(detect_mime_type(path))
    return decode_image(path, mime_type), mime_type


def _scale_alpha(image: ImageClass, opacity: float) -> ImageClass:
    """Return a copy of an RGBA image with its alpha channel multiplied by opacity."""
    r, g, b, a = image.split()
    a = a.point(lambda p: int(p * opacity))
    return Image.merge(CANVAS_MODE, (r, g, b, a))


class Canvas:
    """
    Owned RGBA bitmap with acquisition metadata.

    Attributes are read through the ``get_*`` queries. The bitmap is only
    reachable while the handle is live; MIME type and modification time
    stay available after ``release()``.
    """

    def __init__(
        self,
        image: ImageClass,
        mime_type: Optional[str] = None,
        modified: Optional[int] = None,
        path: Optional[PathLike] = None,
        cache_dir: Optional[PathLike] = None,
    ):
        self._handle: Optional[BitmapHandle] = None
        self.image = image
        self._mime_type = mime_type
        self._modified = modified
        self._path = Path(path) if path is not None else None
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._alpha: Optional[int] = None

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    @classmethod
    def from_path(cls, path: PathLike, cache_dir: Optional[PathLike] = None) -> "Canvas":
        """
        Decode an image file, optionally through a disk cache.

        When ``cache_dir`` is set, a cached copy that is at least as new as
        the source is decoded instead of the source, and a source read on a
        cache miss is copied into the cache afterwards. The source no longer
        needs to exist once it has been cached.

        Args:
            path: Path to a GIF, JPEG or PNG file
            cache_dir: Optional existing cache directory

        Returns:
            New Canvas owning the decoded bitmap

        Raises:
            ConfigError: If cache_dir is not an existing directory
            UnsupportedFormatError: If the content is not GIF, JPEG or PNG
            DecodeError: If the file is missing, empty or corrupt
        """
        path = Path(path)
        cache = ImageCache.from_path(cache_dir)
        cached = cache.lookup(path) if cache is not None else None

        if cached is not None:
            try:
                image, mime_type = _decode_file(cached)
            except (DecodeError, UnsupportedFormatError):
                if not path.is_file():
                    raise
                logger.warning(f"Cached copy {cached} is unreadable, decoding {path} instead")
                cached = None

        if cached is None:
            image, mime_type = _decode_file(path)
            if cache is not None:
                cache.store(path)

        modified = file_mtime(path)
        if modified is None and cached is not None:
            modified = file_mtime(cached)

        logger.debug(f"Acquired {mime_type} {image.width}x{image.height} from {cached or path}")
        return cls(
            image,
            mime_type=mime_type,
            modified=modified,
            path=path,
            cache_dir=cache.directory if cache is not None else None,
        )

    @classmethod
    def create(cls, width: int, height: int) -> "Canvas":
        """
        Allocate a blank, fully transparent canvas.

        Raises:
            TypeMismatchError: If width or height is not an integer
            ValidationError: If width or height is not positive
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeMismatchError(f"{name} must be an integer, got {type(value).__name__}")
            if value <= 0:
                raise ValidationError(f"{name} must be > 0, got {value}")

        return cls(Image.new(CANVAS_MODE, (width, height), BLANK_FILL))

    # ------------------------------------------------------------------
    # Handle ownership
    # ------------------------------------------------------------------

    @property
    def image(self) -> Optional[ImageClass]:
        """The owned Pillow image, or None once released."""
        if self._handle is None or self._handle.released:
            return None
        return self._handle.require()

    @image.setter
    def image(self, image: Optional[ImageClass]) -> None:
        if image is None:
            self.release()
            return

        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != CANVAS_MODE:
            image = image.convert(CANVAS_MODE)

        if self._handle is None or self._handle.released:
            self._handle = BitmapHandle(image)
        else:
            self._handle.replace(image)

    def is_valid(self) -> bool:
        return self.image is not None

    def release(self) -> bool:
        """
        Free the bitmap. Safe to call more than once.

        Returns:
            True if this call freed the bitmap
        """
        if self._handle is None:
            return False
        return self._handle.release()

    def require_image(self, message: str = QUERY_INVALID_MESSAGE) -> ImageClass:
        """
        Return the owned image or raise.

        Raises:
            InvalidResourceError: If the handle was released
        """
        if self._handle is None:
            raise InvalidResourceError(message)
        return self._handle.require(message)

    def __enter__(self) -> "Canvas":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_mime_type(self) -> Optional[str]:
        return self._mime_type

    def get_modified(self) -> Optional[int]:
        return self._modified

    def get_path(self) -> Optional[Path]:
        return self._path

    def get_cache_dir(self) -> Optional[Path]:
        return self._cache_dir

    def get_width(self) -> int:
        return self.require_image().width

    def get_height(self) -> int:
        return self.require_image().height

    def set_alpha(self, alpha: Optional[int]) -> "Canvas":
        """Set the default alpha (0-127) used when this canvas is merged with merge_alpha()."""
        if alpha is not None:
            Color.validate_alpha(alpha)
        self._alpha = alpha
        return self

    def get_alpha(self) -> Optional[int]:
        return self._alpha

    # ------------------------------------------------------------------
    # Compositing
    # ------------------------------------------------------------------

    def merge(
        self,
        other: "Canvas",
        dst_x: int = 0,
        dst_y: int = 0,
        strategy: str = DEFAULT_MERGE_STRATEGY,
    ) -> "Canvas":
        """
        Composite another canvas onto this one.

        Strategies:
            MERGE_SCALE_DST: resize ``other`` to fill this canvas from
                (dst_x, dst_y) to its far edges
            MERGE_SCALE_DST_NO_UPSCALE: like MERGE_SCALE_DST but never larger
                than ``other``'s native size
            MERGE_SCALE_SRC: copy ``other`` at native size, clipped to this canvas

        Args:
            other: Canvas to read from (left unmodified)
            dst_x: Destination x of other's top-left corner
            dst_y: Destination y of other's top-left corner
            strategy: One of the MERGE_* strategies

        Returns:
            self

        Raises:
            InvalidResourceError: If either canvas was released
            ValidationError: If strategy is unknown
        """
        base, overlay = self._require_pair(other)

        if strategy not in MERGE_STRATEGIES:
            raise ValidationError(
                f"Unsupported merge strategy: {strategy}. "
                f"Expected one of {', '.join(MERGE_STRATEGIES)}"
            )

        size = self._target_size(base, overlay, dst_x, dst_y, strategy)
        if size is None:
            logger.debug(f"Nothing to merge at ({dst_x}, {dst_y}) onto {base.width}x{base.height}")
            return self

        if size != overlay.size:
            overlay = overlay.resize(size, Image.Resampling.LANCZOS)

        logger.debug(f"Merging {size[0]}x{size[1]} at ({dst_x}, {dst_y}) using {strategy}")
        self._composite(base, overlay, (dst_x, dst_y))
        return self

    def merge_alpha(
        self,
        other: "Canvas",
        dst_x: int = 0,
        dst_y: int = 0,
        alpha: Optional[int] = None,
    ) -> "Canvas":
        """
        Composite another canvas at native size with uniform transparency.

        Args:
            other: Canvas to read from (left unmodified)
            dst_x: Destination x of other's top-left corner
            dst_y: Destination y of other's top-left corner
            alpha: 0 (opaque) to 127 (invisible); defaults to ``other``'s
                alpha setting, or opaque when that is unset

        Returns:
            self

        Raises:
            InvalidResourceError: If either canvas was released
            TypeMismatchError: If alpha is not an integer
            ValidationError: If alpha is outside 0-127
        """
        base, overlay = self._require_pair(other)

        if alpha is None:
            alpha = other.get_alpha()
        if alpha is None:
            alpha = ALPHA_OPAQUE
        Color.validate_alpha(alpha)

        opacity = (ALPHA_MAX - alpha) / ALPHA_MAX
        if opacity < 1.0:
            overlay = _scale_alpha(overlay, opacity)

        logger.debug(f"Merging {overlay.width}x{overlay.height} at ({dst_x}, {dst_y}) with alpha {alpha}")
        self._composite(base, overlay, (dst_x, dst_y))
        return self

    def _require_pair(self, other: "Canvas") -> Tuple[ImageClass, ImageClass]:
        if not isinstance(other, Canvas):
            raise TypeMismatchError(f"Expected Canvas to merge, got {type(other).__name__}")
        return (
            self.require_image(MERGE_INVALID_MESSAGE),
            other.require_image(MERGE_INVALID_MESSAGE),
        )

    @staticmethod
    def _target_size(
        base: ImageClass,
        overlay: ImageClass,
        dst_x: int,
        dst_y: int,
        strategy: str,
    ) -> Optional[Tuple[int, int]]:
        if strategy == MERGE_SCALE_SRC:
            return overlay.size

        width = base.width - dst_x
        height = base.height - dst_y
        if width <= 0 or height <= 0:
            return None

        if strategy == MERGE_SCALE_DST_NO_UPSCALE:
            width = min(width, overlay.width)
            height = min(height, overlay.height)

        return width, height

    def _composite(self, base: ImageClass, overlay: ImageClass, position: Tuple[int, int]) -> None:
        if overlay.mode != CANVAS_MODE:
            overlay = overlay.convert(CANVAS_MODE)

        # Place the overlay on a transparent layer the size of the base; paste clips
        layer = Image.new(CANVAS_MODE, base.size, BLANK_FILL)
        layer.paste(overlay, position)
        self._handle.replace(Image.alpha_composite(base, layer))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def encode(self) -> bytes:
        """
        Encode the bitmap using the acquired MIME type (PNG for blank canvases).

        Raises:
            InvalidResourceError: If the canvas was released
        """
        image = self.require_image(RENDER_INVALID_MESSAGE)
        return encode_image(image, self._mime_type)

    def render(self, stream: Optional[BinaryIO] = None) -> "Canvas":
        """
        Write the encoded bitmap to a binary stream.

        Args:
            stream: Binary output stream (default: standard output)

        Returns:
            self

        Raises:
            InvalidResourceError: If the canvas was released
        """
        data = self.encode()
        if stream is None:
            stream = sys.stdout.buffer
        stream.write(data)
        if hasattr(stream, "flush"):
            stream.flush()
        return self

    def save(self, path: PathLike) -> Path:
        """Write the encoded bitmap to a file and return its path."""
        path = Path(path)
        path.write_bytes(self.encode())
        return path

    def __repr__(self) -> str:
        state = "released" if not self.is_valid() else f"{self.get_width()}x{self.get_height()}"
        return f"Canvas({self._mime_type or 'blank'}, {state}, path={self._path})"

    def to_dict(self) -> Dict[str, Any]:
        """Metadata as a dictionary (excludes the bitmap)."""
        return {
            "mime_type": self._mime_type,
            "modified": self._modified,
            "path": str(self._path) if self._path is not None else None,
            "cache_dir": str(self._cache_dir) if self._cache_dir is not None else None,
            "alpha": self._alpha,
        }
