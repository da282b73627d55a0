"""Image references chosen in the profile form.

A reference is in exactly one of three states:

* ``Unset``: the empty string.
* ``PendingLocalBytes``: ``pending:<uuid>``; the bytes live in process memory
  and disappear on restart, like a browser blob URL.
* ``Durable``: ``media:<sha256>.<ext>``; content-addressed file in the media
  directory, produced by promoting a pending reference on save.

Any other non-empty string (an external URL, a ``data:`` URI from older
records) is treated as durable and passed through untouched.
"""

from __future__ import annotations

import hashlib
import logging
import mimetypes
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from profile_directory.errors import ImageNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 64
DEFAULT_MAX_PENDING_BYTES = 64 * 1024 * 1024

PENDING_PREFIX = "pending:"
DURABLE_PREFIX = "media:"

_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


@dataclass(frozen=True, slots=True)
class Unset:
    pass


@dataclass(frozen=True, slots=True)
class PendingLocalBytes:
    handle: str


@dataclass(frozen=True, slots=True)
class Durable:
    reference: str


ImageReference = Union[Unset, PendingLocalBytes, Durable]


def parse_reference(value: Optional[str]) -> ImageReference:
    if not value:
        return Unset()
    if value.startswith(PENDING_PREFIX):
        return PendingLocalBytes(value[len(PENDING_PREFIX) :])
    return Durable(value)


def format_reference(reference: ImageReference) -> str:
    if isinstance(reference, PendingLocalBytes):
        return f"{PENDING_PREFIX}{reference.handle}"
    if isinstance(reference, Durable):
        return reference.reference
    return ""


def is_image_type(content_type: str) -> bool:
    return content_type.split(";", 1)[0].strip().lower().startswith("image/")


class ImageStore:
    """
    Holds pending uploads in memory and promotes them to media files.

    At most ``max_pending`` uploads totalling ``max_pending_bytes`` are kept;
    the oldest are evicted first and then behave like any lost handle.
    """

    def __init__(
        self,
        media_dir: str | Path,
        max_pending: int = DEFAULT_MAX_PENDING,
        max_pending_bytes: int = DEFAULT_MAX_PENDING_BYTES,
    ) -> None:
        self.media_dir = Path(media_dir)
        self.max_pending = max_pending
        self.max_pending_bytes = max_pending_bytes
        self._pending: "OrderedDict[str, Tuple[bytes, str]]" = OrderedDict()
        self._pending_bytes = 0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _evict(self) -> None:
        while self._pending and (
            len(self._pending) > self.max_pending
            or self._pending_bytes > self.max_pending_bytes
        ):
            handle, (data, _) = self._pending.popitem(last=False)
            self._pending_bytes -= len(data)
            logger.info(f"Evicted pending image {handle}")

    def _take(self, handle: str) -> Optional[Tuple[bytes, str]]:
        staged = self._pending.pop(handle, None)
        if staged is not None:
            self._pending_bytes -= len(staged[0])
        return staged

    def stage(self, data: bytes, content_type: str) -> PendingLocalBytes:
        handle = uuid.uuid4().hex
        self._pending[handle] = (data, content_type.split(";", 1)[0].strip().lower())
        self._pending_bytes += len(data)
        self._evict()
        logger.debug(f"Staged {len(data)} image bytes as {handle}")
        return PendingLocalBytes(handle)

    def promote(self, reference: ImageReference) -> ImageReference:
        """
        Turn a pending reference into a durable one.

        A pending handle that no longer resolves (e.g. after a restart) is
        dropped to ``Unset``; it is never assumed to outlive the process.
        """
        if not isinstance(reference, PendingLocalBytes):
            return reference

        staged = self._take(reference.handle)
        if staged is None:
            logger.warning(
                f"Pending image {reference.handle} is no longer available, clearing it"
            )
            return Unset()

        data, content_type = staged
        extension = _EXTENSIONS.get(content_type) or mimetypes.guess_extension(
            content_type
        )
        name = f"{hashlib.sha256(data).hexdigest()}{extension or '.bin'}"
        self.media_dir.mkdir(parents=True, exist_ok=True)
        path = self.media_dir / name
        if not path.exists():
            path.write_bytes(data)
        logger.info(f"Promoted pending image {reference.handle} to {name}")
        return Durable(f"{DURABLE_PREFIX}{name}")

    def load(self, reference: ImageReference) -> Tuple[bytes, str]:
        """Return ``(bytes, content_type)`` for a pending or media reference."""
        if isinstance(reference, PendingLocalBytes):
            staged = self._pending.get(reference.handle)
            if staged is None:
                raise ImageNotFoundError(format_reference(reference))
            return staged

        if isinstance(reference, Durable) and reference.reference.startswith(
            DURABLE_PREFIX
        ):
            name = reference.reference[len(DURABLE_PREFIX) :]
            path = self.media_dir / name
            if "/" in name or "\\" in name or name.startswith(".") or not path.is_file():
                raise ImageNotFoundError(reference.reference)
            content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
            return path.read_bytes(), content_type

        raise ImageNotFoundError(format_reference(reference))
