"""
Grounded Search Service - civic questions answered with web citations.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from civiclens.core.settings import settings
from civiclens.models.search import SearchResult, Source
from civiclens.services.gemini import GenerationRequest, ModelClient, ResponseContract, Tool
from civiclens.services.gemini.grounding import chunk_citation

logger = logging.getLogger(__name__)


NO_RESULTS_TEXT = "No results found."
SEARCH_FAILED_TEXT = "Sorry, I couldn't perform the search at this time."


def collect_sources(chunks: Iterable[Dict[str, Any]]) -> List[Source]:
    """
    Turn raw grounding chunks into citations.

    - Only web citations with a non-empty uri AND title are kept
    - Duplicate uris are dropped; the first occurrence wins and order is kept
    """
    sources: List[Source] = []
    seen = set()
    for chunk in chunks:
        citation = chunk_citation(chunk, "web")
        uri, title = citation["uri"], citation["title"]
        if not uri or not title or uri in seen:
            continue
        seen.add(uri)
        sources.append(Source(uri=uri, title=title))
    return sources


class GroundedSearchService:
    """Answers free-text civic queries using the web-search retrieval tool."""

    def __init__(self, client: ModelClient, model: Optional[str] = None):
        self.client = client
        self.model = model or settings.GEMINI_SEARCH_MODEL

    async def search(self, query: str) -> SearchResult:
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")

        try:
            response = await self.client.generate(GenerationRequest(
                model=self.model,
                prompt=query.strip(),
                contract=ResponseContract.GROUNDED_TEXT,
                tools=(Tool.GOOGLE_SEARCH,),
            ))
        except Exception as e:
            logger.warning(f"⚠️ Grounded search failed: {e}")
            return SearchResult(text=SEARCH_FAILED_TEXT, sources=[])

        return SearchResult(
            text=response.text or NO_RESULTS_TEXT,
            sources=collect_sources(response.grounding_chunks),
        )
