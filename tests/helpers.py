"""Scripted model clients and canned service payloads shared by the tests."""

import asyncio
from typing import Any, Dict, List, Optional

from civiclens.services.gemini import ModelClient, RawResponse, TransportError


class FakeModelClient(ModelClient):
    """Returns (or raises) scripted items in call order and records every request."""

    def __init__(self, *responses, enabled: bool = True):
        self.responses = list(responses)
        self.requests = []
        self.enabled = enabled

    def is_enabled(self) -> bool:
        return self.enabled

    async def generate(self, request):
        self.requests.append(request)
        if not self.responses:
            raise TransportError("no scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class FailingModelClient(ModelClient):
    """Every call fails the same way."""

    def __init__(self, error: Optional[BaseException] = None):
        self.error = error or TransportError("service unreachable")
        self.requests = []

    def is_enabled(self) -> bool:
        return True

    async def generate(self, request):
        self.requests.append(request)
        raise self.error


class GatedModelClient(ModelClient):
    """
    Each call blocks until the test releases it, so tests decide the order in
    which responses arrive independently of the order calls were made.
    """

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    def is_enabled(self) -> bool:
        return True

    async def generate(self, request):
        slot = {"request": request, "gate": asyncio.Event(), "response": None}
        self.calls.append(slot)
        await slot["gate"].wait()
        if isinstance(slot["response"], BaseException):
            raise slot["response"]
        return slot["response"]

    def release(self, index: int, response) -> None:
        self.calls[index]["response"] = response
        self.calls[index]["gate"].set()


def raw(text: str = "", data=None, chunks=None) -> RawResponse:
    return RawResponse(text=text, data=data, grounding_chunks=list(chunks or []))


def gemini_payload(text: str = "", chunks=None) -> Dict[str, Any]:
    """A generateContent payload with one candidate."""
    candidate: Dict[str, Any] = {"content": {"role": "model", "parts": [{"text": text}]}}
    if chunks is not None:
        candidate["groundingMetadata"] = {"groundingChunks": chunks}
    return {"candidates": [candidate]}


async def settle():
    """Let scheduled tasks run up to their next await."""
    for _ in range(5):
        await asyncio.sleep(0)


VALID_ANALYSIS = {
    "issue_type": "Pothole",
    "severity": "High",
    "confidence": 92,
    "description": "Deep pothole across the left lane.",
    "recommended_action": "Barricade and patch within 24 hours.",
}

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


