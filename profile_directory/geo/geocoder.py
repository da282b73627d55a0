"""Address geocoding clients."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from profile_directory.config import Settings
from profile_directory.errors import GeocodingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lon: float


class Geocoder(ABC):
    name: str

    @abstractmethod
    async def locate(self, address: str) -> Optional[Coordinates]:
        """Resolve ``address`` to coordinates, or ``None`` when nothing matches."""


def _first_coordinates(data: Any) -> Optional[Coordinates]:
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, dict):
        raise GeocodingError(f"Unexpected geocoding result: {first!r}")
    try:
        return Coordinates(lat=float(first["lat"]), lon=float(first["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise GeocodingError(f"Geocoding result has no usable coordinates: {exc}") from exc


class NominatimGeocoder(Geocoder):
    """OpenStreetMap Nominatim ``/search`` client. No caching, no retry."""

    name = "nominatim"

    def __init__(
        self,
        url: str,
        user_agent: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "NominatimGeocoder":
        return cls(
            url=settings.geocoder_url,
            user_agent=settings.geocoder_user_agent,
            timeout=settings.geocoder_timeout_seconds,
            transport=transport,
        )

    async def locate(self, address: str) -> Optional[Coordinates]:
        params = {"format": "json", "q": address}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self._transport
            ) as client:
                response = await client.get(self.url, params=params, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise GeocodingError(f"Geocoding request failed: {exc}") from exc
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError
            raise GeocodingError(f"Geocoding response was not JSON: {exc}") from exc

        coordinates = _first_coordinates(data)
        logger.debug(f"Geocoded {address!r} -> {coordinates}")
        return coordinates
