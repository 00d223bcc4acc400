import json

import pytest

from quotes_api.config import get_settings
from quotes_api.provider import ProviderResult
from quotes_api.quotes import QuoteStore

SAMPLE_QUOTES = {
    "quotes": [
        {"id": "1", "text": "Test quote 1", "author": "Author One"},
        {"id": "2", "text": "Another test quote", "author": "Author Two"},
        {"id": "3", "text": "Third wisdom", "author": "Someone"},
    ]
}


@pytest.fixture
def sample_store():
    return QuoteStore(SAMPLE_QUOTES)


@pytest.fixture
def empty_store():
    return QuoteStore([])


@pytest.fixture
def quotes_file(tmp_path):
    path = tmp_path / "quotes.json"
    path.write_text(json.dumps(SAMPLE_QUOTES), encoding="utf-8")
    return path


@pytest.fixture
def app_env(monkeypatch, quotes_file):
    """Point the app at a temp quote file with no provider key."""
    monkeypatch.setenv("QUOTES_PATH", str(quotes_file))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("AI_PROVIDER", "gemini")
    monkeypatch.setenv("RATE_LIMIT_MAX", "1000")
    monkeypatch.setenv("CHAT_RATE_LIMIT_MAX", "1000")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeProvider:
    name = "gemini"

    def __init__(self, text="Mocked AI response about wisdom and quotes.", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate(self, system_instruction, history, message):
        self.calls.append(
            {"system_instruction": system_instruction, "history": list(history), "message": message}
        )
        if self.error:
            return ProviderResult.failure(self.error)
        return ProviderResult.success(self.text)


@pytest.fixture
def make_provider():
    return FakeProvider
