"""
Pydantic models for the conversational assistant.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """One turn of the transcript. Order in the transcript is the only ordering."""
    role: ChatRole
    text: str

    class Config:
        frozen = True


class ChatSendRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000, description="User message for the assistant")


class ChatSendResponse(BaseModel):
    reply: ChatMessage
    transcript: List[ChatMessage] = Field(default_factory=list)
