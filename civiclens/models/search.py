"""
Pydantic models for grounded web search.
"""

from typing import List

from pydantic import BaseModel, Field


class Source(BaseModel):
    """A citation attached to a grounded answer."""
    uri: str
    title: str

    class Config:
        frozen = True


class SearchResult(BaseModel):
    """
    Answer text plus citations.
    Sources never share a uri; order is first occurrence in the raw citations.
    """
    text: str
    sources: List[Source] = Field(default_factory=list)

    class Config:
        frozen = True


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=1000, description="Free-text civic question")
