"""Domain errors raised by the directory components."""

from __future__ import annotations

from typing import Dict


class DirectoryError(Exception):
    """Base class for profile directory errors."""

    error_code = "directory_error"


class ProfileNotFoundError(DirectoryError):
    error_code = "not_found"

    def __init__(self, profile_id: object, message: str = "Profile not found"):
        super().__init__(message)
        self.profile_id = profile_id
        self.message = message


class FormValidationError(DirectoryError):
    """Raised when a draft is submitted with missing or malformed fields."""

    error_code = "validation_error"

    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


class GeocodingError(DirectoryError):
    error_code = "geocoding_error"


class ImageNotFoundError(DirectoryError):
    error_code = "image_not_found"

    def __init__(self, reference: str):
        super().__init__(f"Image not found: {reference}")
        self.reference = reference


class StorageWriteError(DirectoryError):
    """Raised when the persisted collection could not be replaced."""

    error_code = "storage_unavailable"
