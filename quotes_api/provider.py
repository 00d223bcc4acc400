"""Gemini text generation behind a result value that never raises."""

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from google import genai

from quotes_api.errors import ProviderError
from quotes_api.models import ChatTurn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderResult:
    ok: bool
    text: str = ""
    error: str = ""

    @classmethod
    def success(cls, text: str) -> "ProviderResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, reason: str) -> "ProviderResult":
        return cls(ok=False, error=reason)


class ChatProvider(Protocol):
    name: str

    async def generate(
        self, system_instruction: str, history: Sequence[ChatTurn], message: str
    ) -> ProviderResult: ...


class GeminiProvider:
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout_s: float = 30,
        client: genai.Client | None = None,
    ):
        self.model = model
        self.client = client or genai.Client(
            api_key=api_key,
            http_options=genai.types.HttpOptions(timeout=int(timeout_s * 1000)),
        )

    async def generate(
        self, system_instruction: str, history: Sequence[ChatTurn], message: str
    ) -> ProviderResult:
        """Send history plus the new message; any failure becomes a failed result."""
        contents = []
        for turn in history:
            role = "user" if turn.role == "user" else "model"
            contents.append(
                genai.types.Content(role=role, parts=[genai.types.Part(text=turn.content)])
            )
        contents.append(
            genai.types.Content(role="user", parts=[genai.types.Part(text=message)])
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=genai.types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=0.7,
                    max_output_tokens=1024,
                ),
            )
            text = response.text
            if not text or not text.strip():
                raise ProviderError("empty response from Gemini")
        except Exception as exc:
            return ProviderResult.failure(f"{type(exc).__name__}: {exc}")

        return ProviderResult.success(text.strip())


def build_provider(
    provider_name: str, api_key: str | None, model: str, timeout_s: float
) -> ChatProvider | None:
    """Create the configured provider, or None for fallback-only operation."""
    if provider_name != "gemini":
        logger.warning("AI provider %r is not supported, using fallback responses", provider_name)
        return None
    if not api_key:
        logger.info("GEMINI_API_KEY not found, using fallback responses")
        return None
    try:
        provider = GeminiProvider(api_key=api_key, model=model, timeout_s=timeout_s)
    except Exception:
        logger.exception("Failed to initialize Gemini, using fallback responses")
        return None
    logger.info("Gemini AI initialized (model=%s)", model)
    return provider
