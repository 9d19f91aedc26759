"""Chatbot service backed by Groq's OpenAI-compatible chat completions API.

The chatbot has no retrieval of its own: every question is sent together
with a one-line summary of each school in the store, and the model answers
from that context.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Protocol

import httpx
from fastapi import Depends

from edubot.config import Settings, get_settings
from edubot.db.base import SchoolRepository

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an AI school admission assistant."
DEFAULT_LANGUAGE = "English"


class CompletionServiceError(Exception):
    """Raised when the completion service fails or returns an unusable payload."""


class CompletionClient(Protocol):
    async def complete(self, context: str, question: str, language: str) -> str: ...


# ---------------------------------------------------------------------------
# Prompt assembly
# ---------------------------------------------------------------------------


def _field(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    return "unknown" if value is None else value


def build_school_context(schools: Iterable[Mapping[str, Any]]) -> str:
    """Render one summary line per school for the model's context."""
    return "\n".join(
        f"- {_field(s, 'name')}, {_field(s, 'location')}, {_field(s, 'type')}, "
        f"Fee: ₹{_field(s, 'fee')}, Distance: {_field(s, 'distence')}km"
        for s in schools
    )


def build_user_message(context: str, question: str, language: str) -> str:
    return f"Reply in {language}.\nUse this school data:\n{context}\n\nQuestion: {question}"


# ---------------------------------------------------------------------------
# Groq client
# ---------------------------------------------------------------------------


class GroqCompletionClient:
    """Minimal client for Groq's ``/chat/completions`` endpoint.

    Parameters
    ----------
    api_key:
        Groq API key.  Requests fail with :class:`CompletionServiceError`
        when it is missing.
    model:
        Model identifier, e.g. ``"llama-3.1-8b-instant"``.
    base_url:
        API root, ``https://api.groq.com/openai/v1`` in production.
    timeout:
        Request timeout in seconds.
    transport:
        Optional httpx transport, used by tests to stub the API.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._timeout = timeout
        self._transport = transport

    async def complete(self, context: str, question: str, language: str) -> str:
        """Ask the model *question* about the schools in *context*.

        Raises
        ------
        CompletionServiceError
            If no API key is configured, the request fails, or the response
            has no message content.
        """
        if not self._api_key:
            raise CompletionServiceError("GROQ_API_KEY is not configured")

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_message(context, question, language)},
            ],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise CompletionServiceError(f"Completion API returned HTTP {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            raise CompletionServiceError(f"Network error calling completion API: {exc}") from exc
        except ValueError as exc:
            raise CompletionServiceError("Completion API returned a non-JSON body") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CompletionServiceError("Completion API response has no message content") from exc
        if not isinstance(content, str):
            raise CompletionServiceError("Completion API returned non-text content")
        return content


def get_completion_client(settings: Annotated[Settings, Depends(get_settings)]) -> CompletionClient:
    """Return the completion client configured by *settings*."""
    return GroqCompletionClient(
        api_key=settings.GROQ_API_KEY,
        model=settings.GROQ_MODEL,
        base_url=settings.GROQ_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def ask_chatbot(
    query: str,
    repo: SchoolRepository,
    client: CompletionClient,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Answer *query* in *language* using every school in *repo* as context."""
    schools = await repo.fetch_all_schools()
    context = build_school_context(schools)
    logger.info("Chatbot query with %d schools of context (language=%s)", len(schools), language)
    return await client.complete(context, query, language)
