"""Chat request validation and reply selection (provider or fallback)."""

import logging
from typing import Any, Sequence

from quotes_api.errors import EmptyStoreError
from quotes_api.languages import LANGUAGES, LanguageConfig, get_language
from quotes_api.models import ChatReply, ChatTurn
from quotes_api.provider import ChatProvider, ProviderResult
from quotes_api.quotes import QuoteStore

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000
MAX_HISTORY = 10
SAMPLE_QUOTES = 3
APOLOGY = "I apologize, but I'm having trouble generating a response right now."

PROMPT_TEMPLATE = """{system_prompt}

Here are some sample quotes from our collection:
{quotes}

Provide helpful, inspiring responses while staying true to the wisdom and philosophy themes. Keep responses concise but meaningful."""


def validate_chat_request(body: Any) -> list[str]:
    """Return every problem with a raw chat request body; empty means valid."""
    if not isinstance(body, dict):
        body = {}
    errors = []

    message = body.get("message")
    if not isinstance(message, str) or not message.strip():
        errors.append("Message is required and must be a non-empty string")
    if isinstance(message, str) and len(message) > MAX_MESSAGE_LENGTH:
        errors.append(f"Message must be less than {MAX_MESSAGE_LENGTH} characters")

    language = body.get("language")
    if language is not None and not (isinstance(language, str) and language in LANGUAGES):
        errors.append(f"Language must be one of: {', '.join(LANGUAGES)}")

    history = body.get("history")
    if history is not None:
        if not isinstance(history, list) or len(history) > MAX_HISTORY:
            errors.append(f"History must be an array with maximum {MAX_HISTORY} entries")
        if isinstance(history, list):
            for i, item in enumerate(history):
                item = item if isinstance(item, dict) else {}
                if item.get("role") not in ("user", "assistant"):
                    errors.append(f"History item {i} must have role 'user' or 'assistant'")
                if not isinstance(item.get("content"), str) or not item["content"]:
                    errors.append(f"History item {i} must have content as string")

    return errors


def format_quote(text: str, author: str) -> str:
    return f'"{text}" - {author}'


class ResponseSelector:
    """Picks between a provider reply and a quote-based fallback."""

    def __init__(self, store: QuoteStore, provider: ChatProvider | None = None):
        self.store = store
        self.provider = provider

    def validate(self, body: Any) -> list[str]:
        return validate_chat_request(body)

    def build_system_instruction(self, lang: LanguageConfig) -> str:
        samples = self.store.sample(SAMPLE_QUOTES)
        quotes = "\n".join(format_quote(q.text, q.author) for q in samples)
        return PROMPT_TEMPLATE.format(system_prompt=lang.system_prompt, quotes=quotes)

    async def respond(
        self,
        message: str,
        language: str | None = "en",
        history: Sequence[ChatTurn] = (),
    ) -> ChatReply:
        lang = get_language(language)

        if self.provider is not None:
            try:
                result = await self.provider.generate(
                    self.build_system_instruction(lang), list(history), message
                )
            except Exception as exc:
                logger.exception("AI generation error (%s), using fallback", self.provider.name)
                result = ProviderResult.failure(f"{type(exc).__name__}: {exc}")
            if result.ok:
                return ChatReply(
                    message=result.text,
                    language=lang.code,
                    direction=lang.direction,
                    provider=self.provider.name,
                )
            logger.warning("AI generation failed (%s), using fallback: %s", self.provider.name, result.error)

        return self.fallback(lang)

    def fallback(self, lang: LanguageConfig) -> ChatReply:
        try:
            quote = self.store.random_one()
        except EmptyStoreError as exc:
            logger.error("Fallback response error: %s", exc)
            return ChatReply(
                message=lang.fallback_prefix or APOLOGY,
                language="en",
                direction="ltr",
                provider="fallback",
                error=True,
            )

        message = (
            f"{lang.fallback_prefix}\n\n"
            f"{format_quote(quote.text, quote.author)}\n\n"
            f"{lang.fallback_suffix}"
        )
        return ChatReply(
            message=message,
            language=lang.code,
            direction=lang.direction,
            provider="fallback",
            quote=quote,
        )
