"""File-based cold tier of the tiered cache.

Each evicted entry is pickled into its own file inside a scratch directory
that is created on the first spill and removed again by clear(). File names
are built from the key's text plus a random token so a stale file from an
earlier spill of the same key can never be confused with the current one.
"""

import logging
import os
import pickle
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from spillcache.domain.errors import (
    DeserializeError,
    DirectoryCreateError,
    FileDeleteError,
    FileReadError,
    FileWriteError,
)
from spillcache.domain.models.common import CacheKey, ScratchDir, SpillHandle

logger = logging.getLogger(__name__)

DEFAULT_SCRATCH_PREFIX = "filebackedcache"
SPILL_FILE_SUFFIX = ".ser"
MAX_KEY_TEXT_LENGTH = 64

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def key_to_file_prefix(key: CacheKey) -> str:
    """Turns a key into a file-name-safe prefix ending in '-'."""
    text = _UNSAFE_FILENAME_CHARS.sub("_", str(key))[:MAX_KEY_TEXT_LENGTH]
    return f"{text}-"


class SpilloverStore:
    """Maps cold keys to the pickle files that hold their values."""

    def __init__(
        self,
        scratch_parent: Optional[Union[str, Path]] = None,
        scratch_prefix: str = DEFAULT_SCRATCH_PREFIX,
    ):
        """Initializes an empty store. No directory is created until the first persist.

        Args:
            scratch_parent: Directory to create the scratch directory in
                (system temp directory if None).
            scratch_prefix: Name prefix of the scratch directory.
        """
        self.scratch_parent = Path(scratch_parent) if scratch_parent is not None else None
        self.scratch_prefix = scratch_prefix
        self._index: Dict[Any, SpillHandle] = {}
        self._scratch_dir: Optional[ScratchDir] = None

    @property
    def scratch_dir(self) -> Optional[ScratchDir]:
        """The scratch directory, or None if nothing has been spilled since the last clear."""
        return self._scratch_dir

    def _ensure_scratch_dir(self) -> ScratchDir:
        if self._scratch_dir is None:
            try:
                if self.scratch_parent is not None:
                    self.scratch_parent.mkdir(parents=True, exist_ok=True)
                created = tempfile.mkdtemp(prefix=self.scratch_prefix, dir=self.scratch_parent)
            except OSError as e:
                logger.error(f"Failed to create scratch directory under {self.scratch_parent or tempfile.gettempdir()}: {e}")
                raise DirectoryCreateError(
                    f"Could not create scratch directory: {e}", path=self.scratch_parent
                ) from e
            self._scratch_dir = ScratchDir(Path(created))
            logger.info(f"Created scratch directory {self._scratch_dir}")
        return self._scratch_dir

    def persist(self, key: CacheKey, value: Any) -> SpillHandle:
        """Pickles value into a new file and records it as the cold copy of key.

        Nothing is registered unless the file was written completely.

        Raises:
            DirectoryCreateError: The scratch directory could not be created.
            FileWriteError: The value could not be pickled or written.
            ValueError: key is already cold; evict it first.
        """
        if key in self._index:
            raise ValueError(f"Key {key!r} is already spilled to {self._index[key]}")

        scratch_dir = self._ensure_scratch_dir()

        try:
            payload = pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
        except Exception as e:
            # pickle can fail with almost any exception (PicklingError, RecursionError, errors from __reduce__)
            logger.error(f"Failed to pickle value for key {key!r}: {e}")
            raise FileWriteError(f"Could not serialize value for key {key!r}: {e}", key=key) from e

        try:
            fd, name = tempfile.mkstemp(
                prefix=key_to_file_prefix(key), suffix=SPILL_FILE_SUFFIX, dir=scratch_dir
            )
        except OSError as e:
            logger.error(f"Failed to create spill file for key {key!r} in {scratch_dir}: {e}")
            raise FileWriteError(f"Could not create spill file for key {key!r}: {e}", key=key) from e

        handle = SpillHandle(Path(name))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
        except OSError as e:
            logger.error(f"Failed to write spill file {handle}: {e}")
            self._discard_partial(handle)
            raise FileWriteError(f"Could not write spill file for key {key!r}: {e}", key=key, path=handle) from e

        self._index[key] = handle
        logger.debug(f"Spilled key {key!r} to {handle.name} ({len(payload)} bytes)")
        return handle

    def _discard_partial(self, handle: SpillHandle) -> None:
        try:
            handle.unlink(missing_ok=True)
        except OSError as e:
            # Keep raising the write error, not this one
            logger.warning(f"Failed to remove partially written spill file {handle}: {e}")

    def retrieve(self, key: CacheKey) -> Any:
        """Reads back and unpickles the cold value of key. The entry stays cold.

        Raises:
            KeyError: key is not cold.
            FileReadError: The spill file is missing or unreadable.
            DeserializeError: The spill file contents could not be unpickled.
        """
        handle = self._index[key]
        try:
            payload = handle.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read spill file {handle} for key {key!r}: {e}")
            raise FileReadError(f"Could not read spill file for key {key!r}: {e}", key=key, path=handle) from e

        try:
            return pickle.loads(payload)
        except Exception as e:
            # Corrupt payloads surface as UnpicklingError, EOFError, OverflowError, MemoryError, ...
            logger.error(f"Corrupt spill file {handle} for key {key!r}: {e}")
            raise DeserializeError(f"Could not deserialize value for key {key!r}: {e}", key=key, path=handle) from e

    def evict(self, key: CacheKey) -> bool:
        """Deletes the spill file of key and forgets it.

        The mapping is dropped only once the file is gone. A file that has
        already disappeared counts as deleted.

        Returns:
            True if key was cold, False if it was unknown.

        Raises:
            FileDeleteError: The spill file could not be deleted.
        """
        handle = self._index.get(key)
        if handle is None:
            return False
        self._delete_file(key, handle)
        del self._index[key]
        logger.debug(f"Removed spill file {handle.name} for key {key!r}")
        return True

    def _delete_file(self, key: CacheKey, handle: SpillHandle) -> None:
        try:
            handle.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete spill file {handle} for key {key!r}: {e}")
            raise FileDeleteError(f"Could not delete spill file for key {key!r}: {e}", key=key, path=handle) from e

    def clear(self) -> None:
        """Deletes every spill file and the scratch directory itself.

        Raises:
            FileDeleteError: A file or the directory could not be removed. Entries
                not yet deleted stay registered.
        """
        for key in list(self._index):
            self.evict(key)

        if self._scratch_dir is not None:
            try:
                shutil.rmtree(self._scratch_dir)
            except OSError as e:
                logger.error(f"Failed to remove scratch directory {self._scratch_dir}: {e}")
                raise FileDeleteError(
                    f"Could not remove scratch directory: {e}", path=self._scratch_dir
                ) from e
            logger.info(f"Removed scratch directory {self._scratch_dir}")
            self._scratch_dir = None

    def handle_for(self, key: CacheKey) -> Optional[SpillHandle]:
        return self._index.get(key)

    def keys(self) -> List[Any]:
        return list(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._index))
