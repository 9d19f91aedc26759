from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from edubot.db.base import SchoolRepository
from edubot.db.factory import get_school_repository
from edubot.schemas.chatbot import ChatbotAskRequest, ChatbotAskResponse
from edubot.services.chatbot import CompletionClient, CompletionServiceError, ask_chatbot, get_completion_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chatbot"])


@router.post("/api/chatbot/ask", response_model=ChatbotAskResponse)
async def ask(
    request: ChatbotAskRequest,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
    client: Annotated[CompletionClient, Depends(get_completion_client)],
) -> ChatbotAskResponse:
    """Answer a free-text question using the school data as context."""
    try:
        reply = await ask_chatbot(request.query, repo, client, language=request.language)
    except CompletionServiceError as exc:
        logger.warning("Chatbot request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Chatbot is unavailable") from exc
    return ChatbotAskResponse(reply=reply)
