from abc import ABC, abstractmethod
import logging

from civiclens.models.geocode import GeocodeResult

logger = logging.getLogger(__name__)


class GeocodingProvider(ABC):
    """
    Abstract reverse-geocoding provider.

    Contract:
    - Input: latitude, longitude (floats)
    - Output: GeocodeResult
    - MUST NEVER raise upstream exceptions.
    - MUST return fallback_geocode(lat, lng) when nothing usable comes back.
    """

    @abstractmethod
    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResult:
        raise NotImplementedError


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.6f}, {longitude:.6f}"


def fallback_geocode(latitude: float, longitude: float) -> GeocodeResult:
    return GeocodeResult(address=format_coordinates(latitude, longitude))
