"""
Disk cache for decoded source images.

The cache is one flat directory. A cached copy keeps the base name of its
source file and is considered fresh when its modification time is not older
than the source's. Nothing is locked: concurrent writers may race, and a
copy that fails to write is logged and ignored because the caller already
holds the decoded image.

Classes:
    ImageCache: Cache directory with mtime-based freshness
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from DI_Libs.exceptions import ConfigError

logger = logging.getLogger(__name__)


def file_mtime(path: Path) -> Optional[int]:
    """Return the modification time of a file in whole seconds, or None if missing."""
    try:
        return int(Path(path).stat().st_mtime)
    except FileNotFoundError:
        return None


@dataclass
class ImageCache:
    """Flat cache directory for source images.

    Attributes:
        directory: Existing directory holding cached copies
    """
    directory: Path

    def __post_init__(self):
        """Validate the cache directory."""
        self.directory = Path(self.directory)
        if not self.directory.is_dir():
            raise ConfigError(f"Cache directory at {self.directory} could not be found")

    @classmethod
    def from_path(cls, directory: Optional[Union[str, Path]]) -> Optional["ImageCache"]:
        """Create a cache for ``directory``, or None when no directory is configured."""
        if directory is None:
            return None
        return cls(Path(directory))

    def cache_path(self, source: Path) -> Path:
        """Return the cache location for a source file."""
        return self.directory / Path(source).name

    def is_fresh(self, source: Path) -> bool:
        """
        Check whether a cached copy of ``source`` may be used.

        A cached copy is fresh when it exists and its mtime is greater than
        or equal to the source mtime. A source that no longer exists counts
        as older than any cached copy.
        """
        cached_mtime = file_mtime(self.cache_path(source))
        if cached_mtime is None:
            return False

        source_mtime = file_mtime(source)
        return source_mtime is None or cached_mtime >= source_mtime

    def lookup(self, source: Path) -> Optional[Path]:
        """Return the cached copy of ``source`` if it is fresh, else None."""
        if self.is_fresh(source):
            path = self.cache_path(source)
            logger.debug(f"Cache hit for {source}: {path}")
            return path

        logger.debug(f"Cache miss for {source}")
        return None

    def store(self, source: Path) -> bool:
        """
        Copy ``source`` into the cache.

        Failures are logged, never raised.

        Returns:
            True if the copy was written
        """
        target = self.cache_path(source)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            logger.warning(f"Failed to write cache copy of {source} to {target}: {e}")
            return False

        logger.debug(f"Cached {source} at {target}")
        return True
