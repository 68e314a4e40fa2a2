"""
Owned bitmap handle.

A BitmapHandle owns one Pillow image. The image is reachable only through
``require()``, which raises instead of handing out None once the handle has
been released, and ``release()`` closes the Pillow image exactly once.
"""

from typing import Optional

from DI_Libs.exceptions import InvalidResourceError
from DI_Libs.pillow_compat import ImageClass


class BitmapHandle:
    """Exclusive owner of a Pillow image."""

    def __init__(self, image: ImageClass):
        if not isinstance(image, ImageClass):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        self._image: Optional[ImageClass] = image

    @property
    def released(self) -> bool:
        return self._image is None

    def require(self, message: str = "Attempt to use invalid image resource.") -> ImageClass:
        """
        Return the owned image.

        Args:
            message: Error message used if the handle was released

        Raises:
            InvalidResourceError: If the handle was released
        """
        if self._image is None:
            raise InvalidResourceError(message)
        return self._image

    def replace(self, image: ImageClass) -> None:
        """Swap in a new image, closing the previous one."""
        current = self.require()
        if current is not image:
            current.close()
        self._image = image

    def release(self) -> bool:
        """
        Close the owned image.

        Returns:
            True if this call released the image, False if already released
        """
        if self._image is None:
            return False
        self._image.close()
        self._image = None
        return True

    def __repr__(self) -> str:
        if self._image is None:
            return "BitmapHandle(released)"
        return f"BitmapHandle({self._image.mode} {self._image.width}x{self._image.height})"
