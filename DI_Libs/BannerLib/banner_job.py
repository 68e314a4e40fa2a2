"""
Banner jobs for Dynamic Image.

A banner job describes one generated graphic: a base image (decoded from a
file or allocated blank), image layers merged on top of it and text items
drawn last. Jobs are plain dataclasses that round-trip through dictionaries,
so they can be stored as JSON files next to the images they use.

Example job file:
    {
        "base_image": "background.png",
        "cache_dir": "/var/cache/banners",
        "layers": [
            {"image_path": "logo.png", "x": 10, "y": 10, "strategy": "scale_dst_no_upscale"},
            {"image_path": "badge.png", "x": 300, "y": 5, "alpha": 64}
        ],
        "texts": [
            {"text": "Players online: 42", "x": 20, "y": 80,
             "font": "fonts/vera.ttf", "size": 14,
             "color": [255, 255, 255], "border_color": [0, 0, 0]}
        ]
    }

Classes:
    LayerSpec: One image layer merged onto the base
    TextSpec: One text item with optional border and shadow
    BannerJob: Complete job description

Functions:
    parse_color: Build a Color from a list or dictionary
    build_text_renderer: Build the text decorator chain for a TextSpec
    run_banner_job: Execute a job and return the resulting Canvas
    load_banner_job: Load a job from a JSON file
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from DI_Libs.constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_MERGE_STRATEGY,
    FIELD_BASE_IMAGE,
    FIELD_CACHE_DIR,
    FIELD_HEIGHT,
    FIELD_LAYERS,
    FIELD_OUTPUT,
    FIELD_TEXTS,
    FIELD_WIDTH,
    MERGE_STRATEGIES,
)
from DI_Libs.exceptions import ConfigError, DynamicImageError
from DI_Libs.ImageLib.canvas import Canvas
from DI_Libs.ImageLib.color import Color
from DI_Libs.TextLib.decorators import BorderDecorator, ShadowDecorator
from DI_Libs.TextLib.text import Text, TextRenderer

logger = logging.getLogger(__name__)

ColorValue = Union[Color, Sequence[int], Dict[str, int]]


def parse_color(value: Optional[ColorValue]) -> Optional[Color]:
    """
    Build a Color from a JSON-friendly value.

    Accepts a Color, a [red, green, blue] or [red, green, blue, alpha] list,
    or a dictionary with 'red', 'green', 'blue' and optional 'alpha' keys.

    Raises:
        ConfigError: If the value has an unknown shape
        TypeMismatchError: If a channel is not an integer
        ValidationError: If a channel is out of range
    """
    if value is None or isinstance(value, Color):
        return value

    if isinstance(value, dict):
        return Color.from_dict(value)

    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        return Color(*value)

    raise ConfigError(f"Cannot read color from {value!r}")


def _color_to_list(color: Optional[Color]) -> Optional[List[int]]:
    if color is None:
        return None
    return [color.red, color.green, color.blue, color.alpha]


@dataclass
class LayerSpec:
    """An image merged onto the base.

    Attributes:
        image_path: Path to the layer image
        x: Destination x
        y: Destination y
        strategy: Merge strategy (ignored when alpha is set)
        alpha: If set, merge with merge_alpha() at this alpha (0-127)
    """
    image_path: str
    x: int = 0
    y: int = 0
    strategy: str = DEFAULT_MERGE_STRATEGY
    alpha: Optional[int] = None

    def __post_init__(self):
        """Validate layer parameters."""
        if not self.image_path:
            raise ConfigError("Layer requires an image_path")

        if self.strategy not in MERGE_STRATEGIES:
            raise ConfigError(f"Unsupported merge strategy: {self.strategy}")

        if self.alpha is not None:
            Color.validate_alpha(self.alpha)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image_path": str(self.image_path),
            "x": self.x,
            "y": self.y,
            "strategy": self.strategy,
            "alpha": self.alpha,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayerSpec":
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass
class TextSpec:
    """A text item drawn onto the banner.

    Attributes:
        text: Text to draw
        x: Baseline start x
        y: Baseline y
        font: Path to a TrueType font
        size: Font size in points
        color: Text color
        border_color: Optional outline color
        shadow_color: Optional drop shadow color
    """
    text: str
    x: int
    y: int
    font: str
    size: float = DEFAULT_FONT_SIZE
    color: Color = field(default_factory=lambda: Color(255, 255, 255))
    border_color: Optional[Color] = None
    shadow_color: Optional[Color] = None

    def __post_init__(self):
        self.color = parse_color(self.color)
        self.border_color = parse_color(self.border_color)
        self.shadow_color = parse_color(self.shadow_color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "font": str(self.font),
            "size": self.size,
            "color": _color_to_list(self.color),
            "border_color": _color_to_list(self.border_color),
            "shadow_color": _color_to_list(self.shadow_color),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextSpec":
        missing = [k for k in ("text", "x", "y", "font") if k not in data]
        if missing:
            raise ConfigError(f"Text item missing required fields: {', '.join(missing)}")
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass
class BannerJob:
    """Description of one generated graphic.

    Either base_image or both width and height must be given.

    Attributes:
        base_image: Path to the base image
        width: Width of a blank base canvas
        height: Height of a blank base canvas
        cache_dir: Optional cache directory for every decoded image
        layers: Image layers, merged in order
        texts: Text items, drawn in order after the layers
        output: Optional output file path (the CLI writes to stdout otherwise)
    """
    base_image: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    cache_dir: Optional[str] = None
    layers: List[LayerSpec] = field(default_factory=list)
    texts: List[TextSpec] = field(default_factory=list)
    output: Optional[str] = None

    def __post_init__(self):
        """Validate the base image settings."""
        if self.base_image is None and (self.width is None or self.height is None):
            raise ConfigError("Banner job needs a base_image or both width and height")

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_BASE_IMAGE: self.base_image,
            FIELD_WIDTH: self.width,
            FIELD_HEIGHT: self.height,
            FIELD_CACHE_DIR: self.cache_dir,
            FIELD_LAYERS: [layer.to_dict() for layer in self.layers],
            FIELD_TEXTS: [text.to_dict() for text in self.texts],
            FIELD_OUTPUT: self.output,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BannerJob":
        if not isinstance(data, dict):
            raise ConfigError(f"Banner job must be a JSON object, got {type(data).__name__}")

        layers = [LayerSpec.from_dict(item) for item in data.get(FIELD_LAYERS, [])]
        texts = [TextSpec.from_dict(item) for item in data.get(FIELD_TEXTS, [])]
        return cls(
            base_image=data.get(FIELD_BASE_IMAGE),
            width=data.get(FIELD_WIDTH),
            height=data.get(FIELD_HEIGHT),
            cache_dir=data.get(FIELD_CACHE_DIR),
            layers=layers,
            texts=texts,
            output=data.get(FIELD_OUTPUT),
        )

    def resolve_paths(self, base_dir: Path) -> "BannerJob":
        """Make every relative path in the job relative to ``base_dir``. Returns self."""
        def resolve(value: Optional[str]) -> Optional[str]:
            if value is None or Path(value).is_absolute():
                return value
            return str(base_dir / value)

        self.base_image = resolve(self.base_image)
        self.cache_dir = resolve(self.cache_dir)
        self.output = resolve(self.output)
        for layer in self.layers:
            layer.image_path = resolve(layer.image_path)
        for text in self.texts:
            text.font = resolve(text.font)
        return self


def build_text_renderer(canvas: Canvas, spec: TextSpec) -> TextRenderer:
    """
    Build the renderer for a text item.

    The border sits directly on the text so the shadow is drawn beneath the
    outlined text.
    """
    renderer: TextRenderer = Text(canvas)
    renderer.set_text_font(spec.font).set_text_size(spec.size).set_text_color(spec.color)

    if spec.border_color is not None:
        renderer = BorderDecorator(renderer, spec.border_color)

    if spec.shadow_color is not None:
        renderer = ShadowDecorator(renderer, spec.shadow_color)

    return renderer


def run_banner_job(job: BannerJob) -> Canvas:
    """
    Execute a banner job.

    Args:
        job: Job description

    Returns:
        The finished Canvas (caller owns it)

    Raises:
        DynamicImageError: Any error raised while decoding, merging or
            drawing; the partially built canvas is released first
    """
    if job.base_image is not None:
        canvas = Canvas.from_path(job.base_image, job.cache_dir)
    else:
        canvas = Canvas.create(job.width, job.height)

    try:
        for index, layer in enumerate(job.layers):
            logger.debug(f"Merging layer {index} from {layer.image_path}")
            with Canvas.from_path(layer.image_path, job.cache_dir) as overlay:
                if layer.alpha is not None:
                    canvas.merge_alpha(overlay, layer.x, layer.y, layer.alpha)
                else:
                    canvas.merge(overlay, layer.x, layer.y, layer.strategy)

        for spec in job.texts:
            build_text_renderer(canvas, spec).insert_text(spec.x, spec.y, spec.text)
    except Exception:
        canvas.release()
        raise

    logger.info(
        f"Rendered banner {canvas.get_width()}x{canvas.get_height()} "
        f"with {len(job.layers)} layers and {len(job.texts)} text items"
    )
    return canvas


def load_banner_job(path: Union[str, Path]) -> BannerJob:
    """
    Load a banner job from a JSON file.

    Relative paths inside the job are resolved against the job file's
    directory.

    Raises:
        ConfigError: If the file cannot be read or is not a valid job
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load banner job from {path}: {e}") from e

    try:
        job = BannerJob.from_dict(data)
    except DynamicImageError:
        raise
    except TypeError as e:
        raise ConfigError(f"Invalid banner job in {path}: {e}") from e

    return job.resolve_paths(path.parent)
