"""
Total extraction helpers for generateContent payloads.

The response shape is not guaranteed: candidates, content parts and grounding
metadata may each be missing or of the wrong type. Every helper here returns
an empty value for any absent level instead of raising.
"""

from typing import Any, Dict, List, Optional


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def first_candidate(payload: Any) -> Dict[str, Any]:
    candidates = _as_list(_as_dict(payload).get("candidates"))
    return _as_dict(candidates[0]) if candidates else {}


def extract_text(payload: Any) -> str:
    """Concatenate the text parts of the first candidate (thought parts skipped)."""
    parts = _as_list(_as_dict(first_candidate(payload).get("content")).get("parts"))
    texts = []
    for part in parts:
        part = _as_dict(part)
        if part.get("thought"):
            continue
        text = part.get("text")
        if isinstance(text, str):
            texts.append(text)
    return "".join(texts)


def extract_grounding_chunks(payload: Any) -> List[Dict[str, Any]]:
    """Return candidates[0].groundingMetadata.groundingChunks, keeping only dict entries."""
    metadata = _as_dict(first_candidate(payload).get("groundingMetadata"))
    return [chunk for chunk in _as_list(metadata.get("groundingChunks")) if isinstance(chunk, dict)]


def chunk_citation(chunk: Any, kind: str = "web") -> Dict[str, Optional[str]]:
    """
    Read {uri, title} from one chunk's citation of the given kind ('web' or 'maps').
    Non-string values come back as None.
    """
    citation = _as_dict(_as_dict(chunk).get(kind))
    uri = citation.get("uri")
    title = citation.get("title")
    return {
        "uri": uri if isinstance(uri, str) else None,
        "title": title if isinstance(title, str) else None,
    }
