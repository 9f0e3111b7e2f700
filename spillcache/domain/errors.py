"""Error taxonomy for the tiered cache.

Storage faults (SpillStoreError and subclasses) are fatal to the operation
that raised them: they are never retried or swallowed inside the package.
UnsupportedOperationError marks a documented capability gap rather than a
runtime fault.
"""

from pathlib import Path
from typing import Any, Optional


class SpillCacheError(Exception):
    """Base class for every error raised by spillcache."""


class SpillStoreError(SpillCacheError):
    """An unrecoverable failure while moving an entry to or from disk."""

    def __init__(self, message: str, key: Any = None, path: Optional[Path] = None):
        super().__init__(message)
        self.key = key
        self.path = path


class DirectoryCreateError(SpillStoreError):
    """The scratch directory could not be created."""


class FileWriteError(SpillStoreError):
    """A value could not be serialized or written to its spill file."""


class FileReadError(SpillStoreError):
    """A spill file is missing or could not be read."""


class DeserializeError(SpillStoreError):
    """A spill file was read but its contents could not be unpickled."""


class FileDeleteError(SpillStoreError):
    """A spill file or the scratch directory could not be removed."""


class UnsupportedOperationError(SpillCacheError, NotImplementedError):
    """Raised by operations that would need to load every cold entry from disk."""

    def __init__(self, operation: str):
        super().__init__(
            f"{operation} is not supported: it would have to read every spilled entry back from disk"
        )
        self.operation = operation
