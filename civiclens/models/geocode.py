"""
Pydantic model for reverse-geocoding results.
"""

from typing import Optional

from pydantic import BaseModel, Field


class GeocodeResult(BaseModel):
    """
    Human readable address for a coordinate pair.

    map_link is None when no map citation was found; it is omitted from
    serialized output rather than sent as an empty string.
    """
    address: str
    map_link: Optional[str] = Field(None, description="Map-service citation URI, if one was returned")

    class Config:
        frozen = True
