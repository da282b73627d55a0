"""Geocoding and map view state."""

from profile_directory.geo.geocoder import Coordinates, Geocoder, NominatimGeocoder
from profile_directory.geo.map_view import MapState, MapView

__all__ = ["Coordinates", "Geocoder", "NominatimGeocoder", "MapState", "MapView"]
