from __future__ import annotations

from pydantic import BaseModel

from edubot.services.chatbot import DEFAULT_LANGUAGE


class ChatbotAskRequest(BaseModel):
    """A free-text question for the admission assistant."""

    query: str
    language: str = DEFAULT_LANGUAGE


class ChatbotAskResponse(BaseModel):
    reply: str
