# profile_directory/api/schemas.py
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from profile_directory.directory.models import Profile


class ProfilePayloadModel(BaseModel):
    """Form fields submitted by the admin panel; required-ness is checked by the form."""

    # edit submissions echo back the whole record, id included
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    interests: Optional[str] = None
    image: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("imageFile", "image"),
        serialization_alias="imageFile",
    )

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def provided_fields(self) -> Dict[str, str]:
        """Fields present in the request, keyed by form field name."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class ProfileModel(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    address: str
    description: str
    interests: str
    imageFile: str = ""

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileModel":
        return cls.model_validate(profile.to_record())


class ImageUploadResponseModel(BaseModel):
    reference: str
    url: str
    content_type: str
    size_bytes: int
