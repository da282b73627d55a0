"""Pytest configuration for tests."""

from typing import Dict, List, Optional

import pytest

from profile_directory.config import Settings
from profile_directory.directory.images import ImageStore
from profile_directory.directory.models import ProfileDraft
from profile_directory.directory.storage import MemoryStorage
from profile_directory.directory.store import ProfileStore
from profile_directory.geo.geocoder import Coordinates, Geocoder


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


class FakeGeocoder(Geocoder):
    """Answers from a fixed table and records every lookup."""

    name = "fake"

    def __init__(self, known: Optional[Dict[str, Coordinates]] = None) -> None:
        self.known = dict(known or {})
        self.queries: List[str] = []

    async def locate(self, address: str) -> Optional[Coordinates]:
        self.queries.append(address)
        return self.known.get(address)


def make_draft(**overrides) -> ProfileDraft:
    fields = {
        "name": "Ann",
        "email": "a@x.com",
        "address": "Paris",
        "phone": "1",
        "description": "d",
        "interests": "i",
    }
    fields.update(overrides)
    return ProfileDraft(**fields)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_backend="memory",
        storage_dir=str(tmp_path / "data"),
        media_dir=str(tmp_path / "media"),
        seed_file=None,
    )


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return ProfileStore(storage)


@pytest.fixture
def images(tmp_path):
    return ImageStore(tmp_path / "media")


@pytest.fixture
def geocoder():
    return FakeGeocoder({"Paris": Coordinates(48.8566, 2.3522)})
