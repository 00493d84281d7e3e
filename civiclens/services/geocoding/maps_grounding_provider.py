import logging
from typing import Any, Dict, Iterable, Optional

from civiclens.core.settings import settings
from civiclens.models.geocode import GeocodeResult
from civiclens.services.gemini import GenerationRequest, ModelClient, ResponseContract, Tool
from civiclens.services.gemini.grounding import chunk_citation
from .base import GeocodingProvider, fallback_geocode, format_coordinates

logger = logging.getLogger(__name__)


MAP_LINK_MARKERS = ("google.com/maps", "maps.google.com", "maps.app.goo.gl", "goo.gl/maps")

ADDRESS_PROMPT = "What is the precise street address of this location?"


def find_map_link(chunks: Iterable[Dict[str, Any]]) -> Optional[str]:
    """First citation uri (web or maps) pointing at a map service."""
    for chunk in chunks:
        for kind in ("web", "maps"):
            uri = chunk_citation(chunk, kind)["uri"]
            if uri and any(marker in uri for marker in MAP_LINK_MARKERS):
                return uri
    return None


class MapsGroundingProvider(GeocodingProvider):
    """
    Reverse geocoding through the reasoning service's maps retrieval tool.

    - The exact coordinates are passed as the tool's retrieval location.
    - Fails gracefully and never raises upstream exceptions.
    """

    def __init__(self, client: ModelClient, model: Optional[str] = None):
        self.client = client
        self.model = model or settings.GEMINI_MAPS_MODEL

    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResult:
        try:
            response = await self.client.generate(GenerationRequest(
                model=self.model,
                prompt=ADDRESS_PROMPT,
                contract=ResponseContract.GROUNDED_TEXT,
                tools=(Tool.GOOGLE_MAPS,),
                lat_lng=(latitude, longitude),
            ))
        except Exception as e:
            logger.warning(f"Maps reverse-geocode error: {e}")
            return fallback_geocode(latitude, longitude)

        address = (response.text or "").strip() or format_coordinates(latitude, longitude)
        return GeocodeResult(address=address, map_link=find_map_link(response.grounding_chunks))
