"""
Tests for the Color value type.

Tests cover:
- Setting and getting each channel
- Range validation with fixed messages
- Type validation (floats and strings are type errors, not range errors)
- All-or-nothing setters
- Conversion to Pillow fill tuples and dictionaries
"""

import unittest

from DI_Libs.constants import ALPHA_RANGE_MESSAGE, COLOR_RANGE_MESSAGE
from DI_Libs.exceptions import TypeMismatchError, ValidationError
from DI_Libs.ImageLib.color import Color

# value, range error expected, type error expected
COLOR_VALUES = [
    (128, False, False),
    (0, False, False),
    (255, False, False),
    (0x80, False, False),
    (0x00, False, False),
    (0xFF, False, False),
    (-1, True, False),
    (256, True, False),
    (0x100, True, False),
    (128.5, False, True),
    ("128", False, True),
    ("notanumber", False, True),
]

ALPHA_VALUES = [
    (64, False, False),
    (0, False, False),
    (127, False, False),
    (0x40, False, False),
    (0x7F, False, False),
    (-1, True, False),
    (128, True, False),
    (0x80, True, False),
    (64.5, False, True),
    ("64", False, True),
    ("notanumber", False, True),
]


class TestColorChannels(unittest.TestCase):
    """Test channel setters and getters."""

    def _check_channel(self, setter, getter, values, message):
        for value, range_error, type_error in values:
            with self.subTest(value=value):
                color = Color()
                if type_error:
                    with self.assertRaises(TypeMismatchError):
                        getattr(color, setter)(value)
                elif range_error:
                    with self.assertRaises(ValidationError) as ctx:
                        getattr(color, setter)(value)
                    self.assertEqual(str(ctx.exception), message)
                else:
                    self.assertIs(getattr(color, setter)(value), color)
                    self.assertEqual(getattr(color, getter)(), value)

    def test_set_get_red(self):
        """Test red channel round trip and validation."""
        self._check_channel("set_red", "get_red", COLOR_VALUES, COLOR_RANGE_MESSAGE)

    def test_set_get_green(self):
        """Test green channel round trip and validation."""
        self._check_channel("set_green", "get_green", COLOR_VALUES, COLOR_RANGE_MESSAGE)

    def test_set_get_blue(self):
        """Test blue channel round trip and validation."""
        self._check_channel("set_blue", "get_blue", COLOR_VALUES, COLOR_RANGE_MESSAGE)

    def test_set_get_alpha(self):
        """Test alpha round trip and validation."""
        self._check_channel("set_alpha", "get_alpha", ALPHA_VALUES, ALPHA_RANGE_MESSAGE)

    def test_full_range_round_trip(self):
        """Test every valid value survives a set/get round trip."""
        color = Color()
        for value in range(0, 256):
            color.set_red(value).set_green(value).set_blue(value)
            self.assertEqual(
                (color.get_red(), color.get_green(), color.get_blue()),
                (value, value, value),
            )
        for value in range(0, 128):
            self.assertEqual(color.set_alpha(value).get_alpha(), value)

    def test_defaults_are_zero(self):
        """Test a new color starts black and opaque."""
        color = Color()

        self.assertEqual((color.red, color.green, color.blue, color.alpha), (0, 0, 0, 0))

    def test_invalid_value_leaves_field_unchanged(self):
        """Test setters are all-or-nothing."""
        color = Color(10, 20, 30, 40)

        with self.assertRaises(ValidationError):
            color.set_red(300)
        with self.assertRaises(TypeMismatchError):
            color.set_alpha(1.5)

        self.assertEqual(color.get_red(), 10)
        self.assertEqual(color.get_alpha(), 40)

    def test_bool_is_not_a_channel_value(self):
        """Test booleans are rejected as the wrong type."""
        with self.assertRaises(TypeMismatchError):
            Color().set_green(True)

    def test_direct_assignment_validates(self):
        """Test assigning a field directly applies the same checks."""
        color = Color(10, 20, 30, 40)

        with self.assertRaises(ValidationError):
            color.red = 300
        with self.assertRaises(ValidationError):
            color.alpha = 128
        with self.assertRaises(TypeMismatchError):
            color.alpha = "x"
        with self.assertRaises(TypeMismatchError):
            color.blue = None

        self.assertEqual(color, Color(10, 20, 30, 40))

        color.green = 0xFF
        self.assertEqual(color.get_green(), 255)

    def test_constructor_validates(self):
        """Test the constructor applies the same checks."""
        with self.assertRaises(ValidationError):
            Color(red=256)
        with self.assertRaises(ValidationError):
            Color(alpha=128)
        with self.assertRaises(TypeMismatchError):
            Color(blue="0")


class TestColorValidators(unittest.TestCase):
    """Test static validators."""

    def test_validate_color(self):
        """Test validate_color against the shared value table."""
        for value, range_error, type_error in COLOR_VALUES:
            with self.subTest(value=value):
                if type_error:
                    with self.assertRaises(TypeMismatchError):
                        Color.validate_color(value)
                elif range_error:
                    with self.assertRaisesRegex(ValidationError, "between 0 and 255"):
                        Color.validate_color(value)
                else:
                    self.assertTrue(Color.validate_color(value))

    def test_validate_alpha(self):
        """Test validate_alpha against the shared value table."""
        for value, range_error, type_error in ALPHA_VALUES:
            with self.subTest(value=value):
                if type_error:
                    with self.assertRaises(TypeMismatchError):
                        Color.validate_alpha(value)
                elif range_error:
                    with self.assertRaisesRegex(ValidationError, "between 0 and 127"):
                        Color.validate_alpha(value)
                else:
                    self.assertTrue(Color.validate_alpha(value))

    def test_type_error_is_not_validation_error(self):
        """Test the two failure kinds stay distinguishable."""
        with self.assertRaises(TypeMismatchError) as ctx:
            Color.validate_color("128")

        self.assertNotIsInstance(ctx.exception, ValidationError)
        self.assertIsInstance(ctx.exception, TypeError)


class TestColorConversion(unittest.TestCase):
    """Test conversion helpers."""

    def test_to_rgba_opaque(self):
        """Test alpha 0 maps to Pillow's fully opaque 255."""
        self.assertEqual(Color(1, 2, 3, 0).to_rgba(), (1, 2, 3, 255))

    def test_to_rgba_transparent(self):
        """Test alpha 127 maps to Pillow's fully transparent 0."""
        self.assertEqual(Color(1, 2, 3, 127).to_rgba(), (1, 2, 3, 0))

    def test_to_rgba_half(self):
        """Test intermediate alpha is rescaled."""
        self.assertEqual(Color(0, 0, 0, 64).to_rgba()[3], 126)

    def test_dict_round_trip(self):
        """Test to_dict/from_dict."""
        color = Color(12, 34, 56, 78)

        data = color.to_dict()

        self.assertEqual(data, {"red": 12, "green": 34, "blue": 56, "alpha": 78})
        self.assertEqual(Color.from_dict(data), color)

    def test_from_dict_ignores_unknown_keys(self):
        """Test extra keys are dropped."""
        color = Color.from_dict({"red": 255, "name": "red"})

        self.assertEqual(color, Color(255, 0, 0, 0))


if __name__ == "__main__":
    unittest.main()
