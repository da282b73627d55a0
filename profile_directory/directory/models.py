"""Profile data models."""

from typing import Any, Dict, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS: Tuple[str, ...] = (
    "name",
    "email",
    "phone",
    "address",
    "description",
    "interests",
)
EDITABLE_FIELDS: Tuple[str, ...] = REQUIRED_FIELDS + ("image",)


class ProfileDraft(BaseModel):
    """An in-progress profile that has not been persisted yet."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Contact email")
    phone: str = Field(default="", description="Phone number kept as plain text")
    address: str = Field(
        default="", description="Free-text address, also used as geocoding query"
    )
    description: str = Field(default="")
    interests: str = Field(default="")
    image: str = Field(
        default="",
        validation_alias=AliasChoices("imageFile", "image"),
        serialization_alias="imageFile",
        description="Image reference: durable, pending or empty",
    )

    @field_validator("phone", mode="before")
    @classmethod
    def phone_as_text(cls, value: Any) -> Any:
        """Numeric phones from older records are kept as text, never parsed."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("image", mode="before")
    @classmethod
    def image_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def form_fields(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}


class Profile(ProfileDraft):
    """A stored directory entry."""

    id: int = Field(..., description="Unique, immutable identifier")

    @classmethod
    def from_draft(cls, profile_id: int, draft: ProfileDraft) -> "Profile":
        return cls(id=profile_id, **draft.form_fields())

    def to_draft(self) -> ProfileDraft:
        return ProfileDraft(**self.form_fields())

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the persisted record layout."""
        return self.model_dump(by_alias=True)
