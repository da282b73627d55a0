"""Named-slot storage backends holding serialized blobs."""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from profile_directory.config import Settings

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """A key/value store where each slot holds one opaque blob."""

    name: str

    @abstractmethod
    def read(self, slot: str) -> Optional[bytes]:
        """Return the blob stored in ``slot`` or ``None`` when it is absent."""

    @abstractmethod
    def write(self, slot: str, data: bytes) -> None:
        """Replace the blob stored in ``slot``."""


class MemoryStorage(StorageBackend):
    name = "memory"

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._slots: Dict[str, bytes] = dict(initial or {})

    def read(self, slot: str) -> Optional[bytes]:
        return self._slots.get(slot)

    def write(self, slot: str, data: bytes) -> None:
        self._slots[slot] = data


class FileStorage(StorageBackend):
    """One JSON file per slot inside ``directory``, replaced atomically."""

    name = "file"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def read(self, slot: str) -> Optional[bytes]:
        path = self._path(slot)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, slot: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(slot)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.directory, prefix=f".{slot}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Wrote {len(data)} bytes to {path}")


def create_storage(settings: Settings) -> StorageBackend:
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return FileStorage(settings.storage_dir)
