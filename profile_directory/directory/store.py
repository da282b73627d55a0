"""Whole-collection profile repository backed by a single storage slot."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

import orjson
from pydantic import ValidationError

from profile_directory.directory.models import Profile, ProfileDraft
from profile_directory.directory.storage import StorageBackend
from profile_directory.errors import ProfileNotFoundError, StorageWriteError

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "profiles"


class ProfileStore:
    """
    Repository for the profile collection.

    Every read loads the full collection from the backing slot and every
    mutation rewrites it. Two writers in the same session race with
    last-write-wins semantics.
    """

    def __init__(
        self,
        storage: StorageBackend,
        slot: str = DEFAULT_SLOT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.slot = slot
        self._clock = clock

    def list(self) -> List[Profile]:
        """
        Return the persisted collection in insertion order.

        Missing or unreadable data yields an empty list; this method never
        raises.
        """
        try:
            raw = self.storage.read(self.slot)
        except Exception as exc:
            logger.error(f"Error reading profiles from slot '{self.slot}': {exc}")
            return []

        if raw is None:
            return []

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            logger.warning(f"Corrupt profile data in slot '{self.slot}': {exc}")
            return []

        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(
                f"Expected a list in slot '{self.slot}', got {type(data).__name__}"
            )
            return []

        profiles: List[Profile] = []
        seen_ids = set()
        for index, record in enumerate(data):
            try:
                profile = Profile.model_validate(record)
            except ValidationError as exc:
                logger.warning(f"Skipping malformed profile record #{index}: {exc}")
                continue
            if profile.id in seen_ids:
                logger.warning(f"Skipping duplicate profile id {profile.id}")
                continue
            seen_ids.add(profile.id)
            profiles.append(profile)
        return profiles

    def get(self, profile_id: int) -> Optional[Profile]:
        for profile in self.list():
            if profile.id == profile_id:
                return profile
        return None

    def add(self, draft: ProfileDraft) -> Profile:
        profiles = self.list()
        profile = Profile.from_draft(self._next_id(profiles), draft)
        profiles.append(profile)
        self._persist(profiles)
        logger.info(f"Added profile {profile.id}")
        return profile

    def update(self, profile: Profile) -> Profile:
        profiles = self.list()
        for index, existing in enumerate(profiles):
            if existing.id == profile.id:
                profiles[index] = profile
                break
        else:
            raise ProfileNotFoundError(profile.id)
        self._persist(profiles)
        logger.info(f"Updated profile {profile.id}")
        return profile

    def remove(self, profile_id: int) -> None:
        profiles = self.list()
        remaining = [profile for profile in profiles if profile.id != profile_id]
        if len(remaining) == len(profiles):
            logger.debug(f"Remove requested for absent profile {profile_id}")
        else:
            logger.info(f"Removed profile {profile_id}")
        self._persist(remaining)

    def _next_id(self, profiles: List[Profile]) -> int:
        # Millisecond timestamps, bumped past the highest id so rapid
        # creation never collides.
        now_ms = int(self._clock() * 1000)
        highest = max((profile.id for profile in profiles), default=0)
        return max(now_ms, highest + 1)

    def _persist(self, profiles: List[Profile]) -> None:
        payload = orjson.dumps([profile.to_record() for profile in profiles])
        try:
            self.storage.write(self.slot, payload)
        except OSError as exc:
            logger.error(f"Error writing profiles to slot '{self.slot}': {exc}")
            raise StorageWriteError(str(exc)) from exc
