"""Async AI study assistant backed by OpenAI or Anthropic chat APIs."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Literal, TypedDict

import anthropic
import httpx
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from scripture_study.exceptions import ConfigurationError, UpstreamAPIError

if TYPE_CHECKING:
    from scripture_study.config import Settings
    from scripture_study.schemas import VerseRecord

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"

SYSTEM_PROMPT = """\
You are a helpful Bible study assistant. You have access to the full text of scripture,
commentary, lexicon data, and cross-references. Your role is to help users understand and explore
the Bible through thoughtful analysis, historical context, and theological insights.

When answering questions:
- Be respectful and thoughtful
- Cite specific verses when relevant
- Provide historical and cultural context
- Explain original language meanings when helpful
- Draw connections to other passages
- Remain objective and scholarly

Format your responses in Markdown for clarity."""


class ChatMessage(TypedDict):
    role: Literal["system", "user", "assistant"]
    content: str


def format_passage_context(
    *,
    current_verse: VerseRecord | None = None,
    surrounding_verses: Sequence[VerseRecord] | None = None,
    additional_context: str | None = None,
) -> str:
    """Describe the passage under study for the model.

    Surrounding verses are listed in a fenced block with ``→`` marking the
    current verse; without them the current verse is quoted on its own.
    """
    text = "Current passage context:\n\n"

    if surrounding_verses:
        current_uid = current_verse.uid if current_verse else None
        text += "```\n"
        for verse in surrounding_verses:
            marker = "→ " if verse.uid == current_uid else "  "
            text += f"{marker}{verse.reference} - {verse.text}\n"
        text += "```\n\n"
    elif current_verse:
        text += f"{current_verse.reference}\n"
        text += f'"{current_verse.text}"\n\n'

    if additional_context:
        text += additional_context

    return text


def build_messages(
    user_message: str,
    *,
    current_verse: VerseRecord | None = None,
    surrounding_verses: Sequence[VerseRecord] | None = None,
    additional_context: str | None = None,
) -> list[ChatMessage]:
    """System prompt, optional passage context, then the user's message."""
    messages: list[ChatMessage] = [{"role": "system", "content": SYSTEM_PROMPT}]
    if current_verse or surrounding_verses or additional_context:
        messages.append(
            {
                "role": "system",
                "content": format_passage_context(
                    current_verse=current_verse,
                    surrounding_verses=surrounding_verses,
                    additional_context=additional_context,
                ),
            }
        )
    messages.append({"role": "user", "content": user_message})
    return messages


def extract_error_message(body: object) -> str:
    """Pull the human-readable message out of a provider error payload.

    Handles both ``{"error": {"message": ...}}`` and an already-unwrapped
    ``{"message": ...}``.
    """
    if isinstance(body, Mapping):
        error = body.get("error", body)
        if isinstance(error, Mapping):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
    return UNKNOWN_ERROR


class StudyAssistant:
    """Answer study questions about a passage using the configured provider.

    Providers:
        - openai: Chat Completions API
        - anthropic: Messages API

    Failed calls are not retried; the SDK clients are created with
    ``max_retries=0``.
    """

    def __init__(self, settings: Settings, *, http_client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._http_client = http_client
        self._openai: AsyncOpenAI | None = None
        self._anthropic: AsyncAnthropic | None = None

    @property
    def provider(self) -> str:
        return self._settings.ai_provider

    async def query(
        self,
        user_message: str,
        *,
        current_verse: VerseRecord | None = None,
        surrounding_verses: Sequence[VerseRecord] | None = None,
        additional_context: str | None = None,
    ) -> str:
        """Send a question with optional passage context and return the reply text.

        Raises:
            ConfigurationError: The selected provider has no API key.
            UpstreamAPIError: The provider returned a non-success status.
        """
        messages = build_messages(
            user_message,
            current_verse=current_verse,
            surrounding_verses=surrounding_verses,
            additional_context=additional_context,
        )

        start_time = time.time()
        if self._settings.ai_provider == "anthropic":
            reply = await self._call_anthropic(messages)
        else:
            reply = await self._call_openai(messages)

        if self._settings.log_api_calls:
            elapsed = (time.time() - start_time) * 1000  # ms
            logger.info(
                "[AI] %s @ %s (%d messages) → %d chars (%.0fms)",
                self._settings.ai_model,
                self._settings.ai_provider,
                len(messages),
                len(reply),
                elapsed,
            )

        return reply

    async def aclose(self) -> None:
        """Close any SDK clients created so far."""
        if self._openai is not None:
            await self._openai.close()
            self._openai = None
        if self._anthropic is not None:
            await self._anthropic.close()
            self._anthropic = None

    async def _call_openai(self, messages: list[ChatMessage]) -> str:
        if not self._settings.openai_api_key:
            raise ConfigurationError("OpenAI API key not configured")

        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                max_retries=0,
                http_client=self._http_client,
            )

        try:
            response = await self._openai.chat.completions.create(
                model=self._settings.ai_model,
                messages=messages,  # type: ignore[arg-type]
                temperature=self._settings.ai_temperature,
                max_tokens=self._settings.ai_max_tokens,
            )
        except openai.APIStatusError as e:
            raise UpstreamAPIError("OpenAI", extract_error_message(e.body), e.status_code) from e

        return response.choices[0].message.content or ""

    async def _call_anthropic(self, messages: list[ChatMessage]) -> str:
        if not self._settings.anthropic_api_key:
            raise ConfigurationError("Anthropic API key not configured")

        if self._anthropic is None:
            self._anthropic = AsyncAnthropic(
                api_key=self._settings.anthropic_api_key,
                max_retries=0,
                http_client=self._http_client,
            )

        # Anthropic takes system text as a parameter, not as messages
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        conversation = [
            {"role": m["role"], "content": m["content"]} for m in messages if m["role"] != "system"
        ]

        try:
            response = await self._anthropic.messages.create(
                model=self._settings.ai_model,
                max_tokens=self._settings.ai_max_tokens,
                system=system,
                messages=conversation,  # type: ignore[arg-type]
            )
        except anthropic.APIStatusError as e:
            raise UpstreamAPIError("Anthropic", extract_error_message(e.body), e.status_code) from e

        for block in response.content:
            if block.type == "text":
                return block.text
        return ""
