"""Per-application service container and FastAPI dependency getters."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from profile_directory.config import Settings
from profile_directory.directory.images import ImageStore
from profile_directory.directory.store import ProfileStore
from profile_directory.geo.geocoder import Geocoder


@dataclass(slots=True)
class DirectoryServices:
    settings: Settings
    store: ProfileStore
    images: ImageStore
    geocoder: Geocoder


def get_services(request: Request) -> DirectoryServices:
    return request.app.state.services
