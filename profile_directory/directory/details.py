"""Single-profile lookup for the read-only detail view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from profile_directory.directory.models import Profile
from profile_directory.directory.store import ProfileStore

PROFILE_NOT_FOUND = "Profile not found"
STORE_EMPTY = "No profiles found in storage"


@dataclass(frozen=True, slots=True)
class NotFound:
    profile_id: object
    message: str = PROFILE_NOT_FOUND
    store_empty: bool = False


def get_by_id(store: ProfileStore, profile_id: object) -> Union[Profile, NotFound]:
    """Look up a profile; route ids that are not integers are simply not found."""
    try:
        wanted = int(str(profile_id).strip())
    except (TypeError, ValueError):
        return NotFound(profile_id)

    profiles = store.list()
    if not profiles:
        return NotFound(profile_id, store_empty=True)
    for profile in profiles:
        if profile.id == wanted:
            return profile
    return NotFound(profile_id)
