"""
Color value type for Dynamic Image.

A Color holds three 8-bit channels and a 7-bit alpha value where 0 is fully
opaque and 127 is fully transparent. Every field is validated on write and
setters are all-or-nothing: an invalid value leaves the color unchanged.

Classes:
    Color: Validated RGBA color with 7-bit alpha
"""

from dataclasses import dataclass, asdict
from numbers import Integral
from typing import Any, Dict, Tuple

from DI_Libs.constants import (
    ALPHA_MAX,
    ALPHA_MIN,
    ALPHA_RANGE_MESSAGE,
    COLOR_MAX,
    COLOR_MIN,
    COLOR_RANGE_MESSAGE,
)
from DI_Libs.exceptions import TypeMismatchError, ValidationError

RgbaColor = Tuple[int, int, int, int]

_COLOR_FIELDS = ("red", "green", "blue")


def _require_integer(value: Any, what: str) -> None:
    # bool is an Integral subclass but never a channel value
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeMismatchError(
            f"{what} must be an integer, got {type(value).__name__}"
        )


@dataclass
class Color:
    """RGBA color with 8-bit channels and 7-bit alpha.

    Attributes:
        red: Red channel (0-255)
        green: Green channel (0-255)
        blue: Blue channel (0-255)
        alpha: Alpha (0-127, where 0 is opaque and 127 fully transparent)
    """
    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 0

    def __setattr__(self, name: str, value: Any) -> None:
        # Every write, including the generated __init__, is validated first
        if name in _COLOR_FIELDS:
            Color.validate_color(value)
        elif name == "alpha":
            Color.validate_alpha(value)
        super().__setattr__(name, value)

    @staticmethod
    def validate_color(value: Any) -> bool:
        """
        Check a color channel value.

        Args:
            value: Channel value to check

        Returns:
            True if the value is a valid channel value

        Raises:
            TypeMismatchError: If value is not an integer
            ValidationError: If value is outside 0-255
        """
        _require_integer(value, "Color")
        if not (COLOR_MIN <= value <= COLOR_MAX):
            raise ValidationError(COLOR_RANGE_MESSAGE)
        return True

    @staticmethod
    def validate_alpha(value: Any) -> bool:
        """
        Check an alpha value.

        Args:
            value: Alpha value to check

        Returns:
            True if the value is a valid alpha value

        Raises:
            TypeMismatchError: If value is not an integer
            ValidationError: If value is outside 0-127
        """
        _require_integer(value, "Alpha")
        if not (ALPHA_MIN <= value <= ALPHA_MAX):
            raise ValidationError(ALPHA_RANGE_MESSAGE)
        return True

    def set_red(self, value: int) -> "Color":
        self.red = value
        return self

    def get_red(self) -> int:
        return self.red

    def set_green(self, value: int) -> "Color":
        self.green = value
        return self

    def get_green(self) -> int:
        return self.green

    def set_blue(self, value: int) -> "Color":
        self.blue = value
        return self

    def get_blue(self) -> int:
        return self.blue

    def set_alpha(self, value: int) -> "Color":
        self.alpha = value
        return self

    def get_alpha(self) -> int:
        return self.alpha

    def to_rgba(self) -> RgbaColor:
        """
        Convert to a Pillow fill tuple.

        Pillow uses 8-bit alpha where 255 is opaque, so the 7-bit value is
        inverted and rescaled.

        Returns:
            (R, G, B, A) tuple with A in 0-255
        """
        return (
            self.red,
            self.green,
            self.blue,
            round((ALPHA_MAX - self.alpha) * 255 / ALPHA_MAX),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Color":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
