"""
Model Client Base Interface.

Defines the request / response contract between domain components and the
reasoning service. Implementations own the transport only; they know
nothing about civic semantics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from civiclens.services.gemini.schema import ResponseSchema


class ResponseContract(str, Enum):
    """Shape of the response a request asks for."""
    TEXT = "text"
    JSON = "json"
    GROUNDED_TEXT = "grounded_text"


class Tool(str, Enum):
    """Retrieval tools the service can ground an answer with."""
    GOOGLE_SEARCH = "google_search"
    GOOGLE_MAPS = "google_maps"


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class Turn:
    """A prior conversation turn in the service's format (role is 'user' or 'model')."""
    role: str
    text: str


@dataclass(frozen=True)
class GenerationRequest:
    """
    One outbound generation call.

    - JSON contract requires a schema.
    - GROUNDED_TEXT contract requires at least one tool.
    """
    model: str
    prompt: str
    contract: ResponseContract = ResponseContract.TEXT
    image: Optional[ImagePart] = None
    history: Sequence[Turn] = ()
    system_instruction: Optional[str] = None
    schema: Optional[ResponseSchema] = None
    tools: Sequence[Tool] = ()
    lat_lng: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        if self.contract == ResponseContract.JSON and self.schema is None:
            raise ValueError("JSON contract requires a response schema")
        if self.contract == ResponseContract.GROUNDED_TEXT and not self.tools:
            raise ValueError("Grounded contract requires at least one retrieval tool")


@dataclass
class RawResponse:
    """
    Decoded service payload.

    data is only populated for the JSON contract, after schema validation.
    grounding_chunks is always a list (possibly empty).
    """
    text: str = ""
    data: Optional[Dict[str, Any]] = None
    grounding_chunks: List[Dict[str, Any]] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)


class ModelClient(ABC):
    """
    Abstract base class for reasoning-service clients.

    generate() MUST:
    - Raise a ServiceError subclass on any transport or decoding failure
    - Not retry and not cache
    """

    @abstractmethod
    def is_enabled(self) -> bool:
        """True if the client is configured and can make calls."""
        pass

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> RawResponse:
        """Perform one generation call."""
        pass
