import asyncio

import pytest

from quotes_api.chat import APOLOGY, ResponseSelector, validate_chat_request
from quotes_api.languages import LANGUAGES, get_language
from quotes_api.models import ChatTurn


def test_language_configs():
    assert get_language("en").direction == "ltr"
    assert get_language("ar").direction == "rtl"
    assert get_language("ar").name == "Arabic"
    assert "العربية" in get_language("ar").system_prompt
    assert get_language("ckb").name == "Sorani Kurdish"
    assert "کوردی سۆرانی" in get_language("ckb").system_prompt


@pytest.mark.parametrize("code", ["unknown", None, "", ["en"]])
def test_unknown_language_defaults_to_english(code):
    assert get_language(code) is LANGUAGES["en"]


def test_validate_valid_request():
    body = {
        "message": "hi",
        "language": "ckb",
        "history": [{"role": "user", "content": "a"}, {"role": "assistant", "content": "b"}],
    }
    assert validate_chat_request(body) == []


def test_validate_missing_message():
    assert "Message is required and must be a non-empty string" in validate_chat_request({})


@pytest.mark.parametrize("message", ["   ", 123, None])
def test_validate_bad_message(message):
    errors = validate_chat_request({"message": message})
    assert "Message is required and must be a non-empty string" in errors


def test_validate_long_message():
    errors = validate_chat_request({"message": "a" * 1001})
    assert errors == ["Message must be less than 1000 characters"]
    assert validate_chat_request({"message": "a" * 1000}) == []


def test_validate_language():
    errors = validate_chat_request({"message": "hi", "language": "xx"})
    assert errors == ["Language must be one of: en, ar, ckb"]


def test_validate_history_too_long():
    history = [{"role": "user", "content": "x"}] * 11
    errors = validate_chat_request({"message": "hi", "history": history})
    assert errors == ["History must be an array with maximum 10 entries"]


def test_validate_history_not_a_list():
    errors = validate_chat_request({"message": "hi", "history": "nope"})
    assert errors == ["History must be an array with maximum 10 entries"]


def test_validate_collects_all_history_errors():
    history = [
        {"role": "system", "content": "x"},
        {"role": "user", "content": 5},
        "garbage",
    ]
    errors = validate_chat_request({"message": "hi", "history": history})
    assert errors == [
        "History item 0 must have role 'user' or 'assistant'",
        "History item 1 must have content as string",
        "History item 2 must have role 'user' or 'assistant'",
        "History item 2 must have content as string",
    ]


def test_validate_reports_everything_at_once():
    errors = validate_chat_request({"message": "", "language": "fr", "history": {}})
    assert len(errors) == 3


def test_fallback_without_provider(sample_store):
    selector = ResponseSelector(sample_store)
    reply = asyncio.run(selector.respond("hi", "ar"))

    assert reply.provider == "fallback"
    assert reply.direction == "rtl"
    assert reply.language == "ar"
    assert reply.quote in sample_store.all()
    assert reply.message.startswith(LANGUAGES["ar"].fallback_prefix)
    assert f'"{reply.quote.text}" - {reply.quote.author}' in reply.message
    assert reply.message.endswith(LANGUAGES["ar"].fallback_suffix)
    assert reply.error is False


def test_fallback_unknown_language(sample_store):
    reply = asyncio.run(ResponseSelector(sample_store).respond("hi", "xx"))
    assert reply.language == "en"
    assert reply.direction == "ltr"


def test_provider_success(sample_store, make_provider):
    provider = make_provider(text="Wise words.")
    selector = ResponseSelector(sample_store, provider)
    history = [ChatTurn(role="user", content="hello"), ChatTurn(role="assistant", content="hey")]

    reply = asyncio.run(selector.respond("tell me a quote", "en", history))

    assert reply.message == "Wise words."
    assert reply.provider == "gemini"
    assert reply.quote is None
    call = provider.calls[0]
    assert call["message"] == "tell me a quote"
    assert call["history"] == history
    assert LANGUAGES["en"].system_prompt in call["system_instruction"]
    assert call["system_instruction"].count('" - ') == 3


def test_provider_failure_falls_back(sample_store, make_provider, caplog):
    selector = ResponseSelector(sample_store, make_provider(error="TimeoutError: slow"))
    reply = asyncio.run(selector.respond("hi", "ckb"))

    assert reply.provider == "fallback"
    assert reply.language == "ckb"
    assert reply.quote is not None
    assert "TimeoutError: slow" in caplog.text


def test_total_failure_never_raises(empty_store, make_provider):
    selector = ResponseSelector(empty_store, make_provider(error="boom"))
    reply = asyncio.run(selector.respond("hi", "ar"))

    assert reply.provider == "fallback"
    assert reply.error is True
    assert reply.language == "en"
    assert reply.direction == "ltr"
    assert reply.message == LANGUAGES["ar"].fallback_prefix
    assert reply.quote is None


def test_apology_when_preamble_missing(empty_store):
    from dataclasses import replace

    lang = replace(LANGUAGES["en"], fallback_prefix="")
    reply = ResponseSelector(empty_store).fallback(lang)
    assert reply.message == APOLOGY
    assert reply.error is True


def test_validate_rejects_empty_history_content():
    errors = validate_chat_request({"message": "hi", "history": [{"role": "user", "content": ""}]})
    assert errors == ["History item 0 must have content as string"]


class RaisingProvider:
    name = "gemini"

    async def generate(self, system_instruction, history, message):
        raise ConnectionError("network down")


def test_provider_exception_falls_back(sample_store, caplog):
    selector = ResponseSelector(sample_store, RaisingProvider())
    reply = asyncio.run(selector.respond("hi", "en"))

    assert reply.provider == "fallback"
    assert reply.quote in sample_store.all()
    assert reply.error is False
    assert "network down" in caplog.text


def test_provider_exception_with_empty_store_never_raises(empty_store):
    reply = asyncio.run(ResponseSelector(empty_store, RaisingProvider()).respond("hi", "ckb"))
    assert reply.provider == "fallback"
    assert reply.error is True
