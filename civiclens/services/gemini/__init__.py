"""
Model client adapter for the Gemini reasoning service.

Owns the transport only. Domain components build GenerationRequests and
decide their own fallbacks when a ServiceError is raised.
"""

from civiclens.services.gemini.base import (
    GenerationRequest,
    ImagePart,
    ModelClient,
    RawResponse,
    ResponseContract,
    Tool,
    Turn,
)
from civiclens.services.gemini.client import GeminiClient, get_model_client, initialize_model_client
from civiclens.services.gemini.errors import (
    EmptyResultError,
    MalformedResponseError,
    ServiceError,
    TransportError,
)
from civiclens.services.gemini.schema import ResponseSchema

__all__ = [
    "EmptyResultError",
    "GeminiClient",
    "GenerationRequest",
    "ImagePart",
    "MalformedResponseError",
    "ModelClient",
    "RawResponse",
    "ResponseContract",
    "ResponseSchema",
    "ServiceError",
    "Tool",
    "TransportError",
    "Turn",
    "get_model_client",
    "initialize_model_client",
]
