"""Client-local durable key/value slots, one file per key."""
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class LocalKeyValueStore:
    """
    Minimal durable key/value storage on the local filesystem.

    Each key is a fixed slot name mapped to a file inside the storage
    directory. Writes replace the slot atomically so a reader never sees
    a half-written value.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _slot_path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / key

    def get_item(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Returns:
            Stored text, or None if the slot was never written

        Raises:
            OSError: if the slot exists but cannot be read
        """
        path = self._slot_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """
        Replace a slot's content.

        Raises:
            OSError: if the slot cannot be written
        """
        path = self._slot_path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Stored local slot {key} ({len(value)} chars)")
