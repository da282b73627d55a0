"""Create/edit form for a single profile."""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from profile_directory.directory.images import (
    ImageReference,
    ImageStore,
    PendingLocalBytes,
    format_reference,
    parse_reference,
)
from profile_directory.directory.models import (
    EDITABLE_FIELDS,
    REQUIRED_FIELDS,
    Profile,
    ProfileDraft,
)
from profile_directory.directory.store import ProfileStore
from profile_directory.errors import FormValidationError

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\+?(?=.*\d)[\d\s().-]+$")


def validate_draft(draft: ProfileDraft) -> Dict[str, str]:
    """Return a mapping of field name to error message; empty when valid."""
    errors: Dict[str, str] = {}
    for field in REQUIRED_FIELDS:
        if not getattr(draft, field).strip():
            errors[field] = "This field is required."

    if "email" not in errors and "@" not in draft.email:
        errors["email"] = "Enter a valid email address."
    if "phone" not in errors and not PHONE_PATTERN.match(draft.phone.strip()):
        errors["phone"] = "Enter a valid phone number."
    return errors


class ProfileForm:
    """
    Holds a draft for create mode (no profile) or edit mode (existing profile).

    Submitting a draft with errors raises ``FormValidationError`` and leaves the
    draft as it was so the caller can keep the form open.
    """

    def __init__(
        self,
        profile: Optional[Profile] = None,
        images: Optional[ImageStore] = None,
    ) -> None:
        self.profile = profile
        self.images = images
        self.draft = profile.to_draft() if profile else ProfileDraft()

    @property
    def is_edit(self) -> bool:
        return self.profile is not None

    @property
    def title(self) -> str:
        return "Update Profile" if self.is_edit else "Add Profile"

    @property
    def image(self) -> ImageReference:
        return parse_reference(self.draft.image)

    def set_field(self, name: str, value: str) -> None:
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        self.draft = self.draft.model_copy(update={name: value})

    def update_fields(self, values: Dict[str, str]) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def select_image(self, data: bytes, content_type: str) -> PendingLocalBytes:
        if self.images is None:
            raise RuntimeError("No image store configured for this form")
        pending = self.images.stage(data, content_type)
        self.set_field("image", format_reference(pending))
        return pending

    def validate(self) -> Dict[str, str]:
        return validate_draft(self.draft)

    def submit(self, store: ProfileStore) -> Profile:
        errors = self.validate()
        if errors:
            logger.info(f"Rejected profile submission: {sorted(errors)}")
            raise FormValidationError(errors)

        draft = self.draft
        if self.images is not None:
            promoted = self.images.promote(self.image)
            draft = draft.model_copy(update={"image": format_reference(promoted)})

        if self.profile is None:
            return store.add(draft)
        return store.update(Profile.from_draft(self.profile.id, draft))
