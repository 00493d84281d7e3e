"""
Conversational Assistant Session.

Owns one ordered, append-only transcript. Each send() splits the exchange the
way a multi-turn service expects it: the transcript as it stood BEFORE the
new message is the history, the new message is the current turn.

Two distinct fallbacks:
- SOFT: the call succeeded but produced no text
- HARD: the call failed outright
"""

import logging
from typing import List, Optional, Sequence, Tuple

from civiclens.core.settings import settings
from civiclens.models.chat import ChatMessage, ChatRole
from civiclens.services.gemini import GenerationRequest, ModelClient, ResponseContract, Turn

logger = logging.getLogger(__name__)


ASSISTANT_SYSTEM_POLICY = (
    "You are CivicBot, a helpful assistant for the CivicLens application. "
    "You help users understand how to report issues, explain civic processes, "
    "and provide general safety advice. Keep answers concise."
)

ASSISTANT_GREETING = "Hi! I am CivicBot. Ask me anything about reporting issues or civic safety."

SOFT_FALLBACK_REPLY = "Sorry, I didn't get that."
HARD_FALLBACK_REPLY = "I'm having trouble connecting right now. Please try again later."


class SessionBusyError(RuntimeError):
    """A send is already pending for this session."""


def to_service_turns(messages: Sequence[ChatMessage]) -> List[Turn]:
    return [Turn(role=message.role.value, text=message.text) for message in messages]


async def generate_reply(
    client: ModelClient,
    history: Sequence[ChatMessage],
    message: str,
    model: Optional[str] = None,
) -> Optional[str]:
    """
    Produce the next assistant turn.

    Returns None when the service answered with no text (caller applies the
    soft fallback) and HARD_FALLBACK_REPLY when the call failed.
    """
    try:
        response = await client.generate(GenerationRequest(
            model=model or settings.GEMINI_CHAT_MODEL,
            prompt=message,
            contract=ResponseContract.TEXT,
            history=to_service_turns(history),
            system_instruction=ASSISTANT_SYSTEM_POLICY,
        ))
    except Exception as e:
        logger.warning(f"⚠️ Assistant reply failed: {e}")
        return HARD_FALLBACK_REPLY

    return response.text or None


class AssistantSession:
    """
    Sequential chat session.

    Only one send may be pending at a time; replies from concurrent sends
    could arrive out of order and corrupt the transcript.
    """

    def __init__(
        self,
        client: ModelClient,
        model: Optional[str] = None,
        max_history_messages: Optional[int] = None,
    ):
        self.client = client
        self.model = model or settings.GEMINI_CHAT_MODEL
        self.max_history_messages = (
            settings.CHAT_MAX_HISTORY_MESSAGES if max_history_messages is None else max_history_messages
        )
        self._transcript: List[ChatMessage] = []
        self._busy = False

    @property
    def transcript(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._transcript)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def history_window(self) -> List[ChatMessage]:
        """
        The most recent messages sent as history.
        The window always opens on a user turn.
        """
        if self.max_history_messages <= 0:
            return []
        window = self._transcript[-self.max_history_messages:]
        while window and window[0].role != ChatRole.USER:
            window = window[1:]
        return window

    async def send(self, text: str) -> ChatMessage:
        """
        Append the user turn, ask the assistant, append exactly one model turn.

        Raises SessionBusyError if a send is already pending and ValueError
        for a blank message.
        """
        if self._busy:
            raise SessionBusyError("A message is already being answered")
        if not text or not text.strip():
            raise ValueError("Message must not be empty")

        history = self.history_window()
        self._transcript.append(ChatMessage(role=ChatRole.USER, text=text))
        self._busy = True

        reply_text = HARD_FALLBACK_REPLY
        try:
            reply = await generate_reply(self.client, history, text, model=self.model)
            reply_text = reply or SOFT_FALLBACK_REPLY
        finally:
            # Also reached on cancellation: the user turn always gets its answer
            reply_message = ChatMessage(role=ChatRole.MODEL, text=reply_text)
            self._transcript.append(reply_message)
            self._busy = False

        return reply_message

    def clear(self) -> None:
        if self._busy:
            raise SessionBusyError("Cannot clear while a message is being answered")
        self._transcript = []
