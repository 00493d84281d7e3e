from .base import GeocodingProvider, fallback_geocode, format_coordinates
from .maps_grounding_provider import MapsGroundingProvider, find_map_link

__all__ = [
    "GeocodingProvider",
    "MapsGroundingProvider",
    "fallback_geocode",
    "find_map_link",
    "format_coordinates",
]
