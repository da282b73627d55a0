"""Profile storage, forms, search and views."""

from profile_directory.directory.models import Profile, ProfileDraft
from profile_directory.directory.store import ProfileStore

__all__ = ["Profile", "ProfileDraft", "ProfileStore"]
