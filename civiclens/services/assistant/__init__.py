"""
Conversational assistant for civic questions.
"""

from civiclens.services.assistant.session import (
    ASSISTANT_GREETING,
    ASSISTANT_SYSTEM_POLICY,
    HARD_FALLBACK_REPLY,
    SOFT_FALLBACK_REPLY,
    AssistantSession,
    SessionBusyError,
    generate_reply,
)

__all__ = [
    "ASSISTANT_GREETING",
    "ASSISTANT_SYSTEM_POLICY",
    "HARD_FALLBACK_REPLY",
    "SOFT_FALLBACK_REPLY",
    "AssistantSession",
    "SessionBusyError",
    "generate_reply",
]
