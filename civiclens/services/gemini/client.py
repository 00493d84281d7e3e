"""
Gemini Model Client - REST transport for the Generative Language API.

Builds one generateContent request per call, runs the blocking HTTP call in
the default executor (so each call is an await point for the event loop) and
decodes the payload according to the requested response contract.

No caching and no retries: failures surface as ServiceError subclasses.
"""

import asyncio
import base64
import json
import logging
from typing import Any, Dict, Optional

import requests

from civiclens.core.settings import settings
from civiclens.services.gemini.base import (
    GenerationRequest,
    ModelClient,
    RawResponse,
    ResponseContract,
    Tool,
)
from civiclens.services.gemini.errors import (
    EmptyResultError,
    MalformedResponseError,
    TransportError,
)
from civiclens.services.gemini.grounding import extract_grounding_chunks, extract_text

logger = logging.getLogger(__name__)


TOOL_PAYLOADS = {
    Tool.GOOGLE_SEARCH: {"googleSearch": {}},
    Tool.GOOGLE_MAPS: {"googleMaps": {}},
}


class GeminiClient(ModelClient):
    """
    Google Gemini REST client.

    Requires an API key. Without one the client is disabled and every call
    raises TransportError, which domain components turn into fallbacks.
    """

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.enabled = bool(api_key and api_key.strip())

        if self.enabled:
            logger.info(f"✅ Gemini client initialized: {self.base_url}")
        else:
            logger.info("⚠️ Gemini client disabled: No API key configured")

    def is_enabled(self) -> bool:
        return self.enabled

    async def generate(self, request: GenerationRequest) -> RawResponse:
        if not self.enabled:
            raise TransportError("Gemini API key not configured")

        body = build_request_body(request)
        loop = asyncio.get_running_loop()
        payload = await loop.run_in_executor(None, self._post, request.model, body)
        return decode_response(payload, request)

    def _post(self, model: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/models/{model}:generateContent"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(url, json=body, headers=headers, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            raise TransportError(f"Gemini API request failed: {e}") from e

        if response.status_code != 200:
            raise TransportError(
                f"Gemini API returned status {response.status_code}: {response.text[:300]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError("Gemini API returned a non-JSON body") from e

        if not isinstance(payload, dict):
            raise MalformedResponseError("Gemini API returned an unexpected payload type")
        return payload


def build_request_body(request: GenerationRequest) -> Dict[str, Any]:
    """Translate a GenerationRequest into a generateContent JSON body."""
    contents = [
        {"role": turn.role, "parts": [{"text": turn.text}]}
        for turn in request.history
    ]

    parts = []
    if request.image is not None:
        parts.append({
            "inline_data": {
                "mime_type": request.image.mime_type,
                "data": base64.b64encode(request.image.data).decode("ascii"),
            }
        })
    parts.append({"text": request.prompt})
    contents.append({"role": "user", "parts": parts})

    body: Dict[str, Any] = {"contents": contents}

    if request.system_instruction:
        body["systemInstruction"] = {"parts": [{"text": request.system_instruction}]}

    if request.contract == ResponseContract.JSON:
        body["generationConfig"] = {
            "responseMimeType": "application/json",
            "responseSchema": request.schema.to_request(),
        }

    if request.tools:
        body["tools"] = [TOOL_PAYLOADS[tool] for tool in request.tools]

    if request.lat_lng is not None:
        latitude, longitude = request.lat_lng
        body["toolConfig"] = {
            "retrievalConfig": {
                "latLng": {"latitude": latitude, "longitude": longitude}
            }
        }

    return body


def parse_json_text(text: str) -> Any:
    """Parse a JSON answer, tolerating a surrounding markdown code fence."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    try:
        return json.loads(text)
    except ValueError as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}") from e


def decode_response(payload: Dict[str, Any], request: GenerationRequest) -> RawResponse:
    """Decode a raw payload according to the request's response contract."""
    text = extract_text(payload)
    chunks = extract_grounding_chunks(payload)

    data = None
    if request.contract == ResponseContract.JSON:
        if not text.strip():
            raise EmptyResultError("Response contained no JSON text")
        data = request.schema.validate(parse_json_text(text))

    return RawResponse(text=text, data=data, grounding_chunks=chunks, payload=payload)


# Process-wide client (constructed once at startup, read-only afterwards)
_client: Optional[ModelClient] = None


def initialize_model_client() -> ModelClient:
    """Construct the shared client from settings (idempotent)."""
    global _client
    if _client is None:
        _client = GeminiClient(
            api_key=settings.GEMINI_API_KEY,
            base_url=settings.GEMINI_API_BASE_URL,
            timeout_seconds=settings.AI_TIMEOUT_SECONDS,
        )
    return _client


def get_model_client() -> ModelClient:
    return initialize_model_client()
