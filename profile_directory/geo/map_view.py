"""Single-marker map state for a profile's address."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Literal, Optional

from profile_directory.config import Settings
from profile_directory.directory.models import Profile
from profile_directory.errors import GeocodingError
from profile_directory.geo.geocoder import Coordinates, Geocoder

logger = logging.getLogger(__name__)

ADDRESS_NOT_FOUND = "Address not found"

MapStatus = Literal["loading", "located", "not_found"]


@dataclass(frozen=True, slots=True)
class MapState:
    session: int
    profile_id: int
    title: str
    address: str
    center: Coordinates
    zoom: int
    tile_url_template: str
    max_zoom: int
    marker: Optional[Coordinates] = None
    status: MapStatus = "loading"
    message: Optional[str] = None


def map_title(profile: Profile) -> str:
    parts = profile.name.split()
    first_name = parts[0] if parts else profile.name
    return f"{first_name}'s Location"


class MapView:
    """
    Owns at most one open map at a time.

    ``open`` tears down whatever was shown before and starts a new session in
    its base state. ``load`` geocodes the session's address; if the session
    was closed or replaced while the lookup was in flight, the late result is
    dropped instead of being applied.
    """

    def __init__(self, geocoder: Geocoder, settings: Settings) -> None:
        self.geocoder = geocoder
        self.settings = settings
        self._state: Optional[MapState] = None
        self._session = 0

    @property
    def state(self) -> Optional[MapState]:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is not None

    def _base_state(self, profile: Profile) -> MapState:
        return MapState(
            session=self._session,
            profile_id=profile.id,
            title=map_title(profile),
            address=profile.address,
            center=Coordinates(
                self.settings.map_default_lat, self.settings.map_default_lon
            ),
            zoom=self.settings.map_default_zoom,
            tile_url_template=self.settings.tile_url_template,
            max_zoom=self.settings.map_max_zoom,
        )

    def open(self, profile: Profile) -> MapState:
        if self._state is not None:
            self.close()
        self._session += 1
        self._state = self._base_state(profile)
        return self._state

    def close(self) -> None:
        if self._state is not None:
            logger.debug(f"Closing map session {self._state.session}")
        self._state = None

    async def load(self) -> Optional[MapState]:
        state = self._state
        if state is None:
            return None

        try:
            coordinates = await self.geocoder.locate(state.address)
        except GeocodingError as exc:
            logger.error(f"Error fetching geocode for {state.address!r}: {exc}")
            coordinates = None

        current = self._state
        if current is None or current.session != state.session:
            logger.debug(f"Discarding geocode result for closed session {state.session}")
            return current

        if coordinates is None:
            logger.error(f"{ADDRESS_NOT_FOUND}: {state.address!r}")
            self._state = replace(
                state, status="not_found", message=ADDRESS_NOT_FOUND
            )
        else:
            self._state = replace(
                state, center=coordinates, marker=coordinates, status="located"
            )
        return self._state

    async def show(self, profile: Profile) -> Optional[MapState]:
        """Open the map for ``profile`` and wait for its marker."""
        self.open(profile)
        return await self.load()
