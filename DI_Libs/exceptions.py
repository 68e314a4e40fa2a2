"""
Error types for Dynamic Image.

Every error derives from DynamicImageError and from the closest builtin
exception, so callers may catch either the library type or the usual
Python one (e.g. ``except ValueError``).

Classes:
    DynamicImageError: Base class for all library errors
    ValidationError: A value is outside its allowed domain
    ConfigError: Invalid configuration (cache directory, job file)
    TypeMismatchError: A value has the wrong type
    UnsupportedFormatError: Image content is not GIF, JPEG or PNG
    DecodeError: Image content could not be decoded
    InvalidResourceError: Operation on a released bitmap handle
    RenderError: Text rendering preconditions are not met
    CapabilityError: No member of a decorator chain provides an operation
"""


class DynamicImageError(Exception):
    """Base class for all Dynamic Image errors."""


class ValidationError(DynamicImageError, ValueError):
    """Raised when a caller-supplied value is out of range."""


class ConfigError(ValidationError):
    """Raised when configuration (cache directory, job file) is invalid."""


class TypeMismatchError(DynamicImageError, TypeError):
    """Raised when a value of the wrong type is supplied."""


class UnsupportedFormatError(DynamicImageError, ValueError):
    """Raised when image content is not one of the supported types."""


class DecodeError(DynamicImageError, OSError):
    """Raised when image content cannot be decoded."""


class InvalidResourceError(DynamicImageError, RuntimeError):
    """Raised when an operation needs a bitmap handle that was released."""


class RenderError(DynamicImageError, RuntimeError):
    """Raised when text cannot be rendered."""


class CapabilityError(DynamicImageError, AttributeError):
    """Raised when a decorator chain cannot provide a requested operation."""
