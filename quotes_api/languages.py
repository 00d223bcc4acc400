"""Supported chat languages and their localized strings."""

from dataclasses import dataclass

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class LanguageConfig:
    code: str
    name: str
    direction: str  # "ltr" or "rtl"
    fallback_prefix: str
    fallback_suffix: str
    system_prompt: str


LANGUAGES: dict[str, LanguageConfig] = {
    "en": LanguageConfig(
        code="en",
        name="English",
        direction="ltr",
        fallback_prefix="Here's a thoughtful quote for you:",
        fallback_suffix=(
            "I hope this quote inspires you! Feel free to ask me anything about quotes, "
            "life wisdom, or request quotes on specific topics."
        ),
        system_prompt=(
            "You are a wise and inspiring assistant that helps people with quotes "
            "and life wisdom. Respond in English."
        ),
    ),
    "ar": LanguageConfig(
        code="ar",
        name="Arabic",
        direction="rtl",
        fallback_prefix="إليك اقتباس ملهم:",
        fallback_suffix=(
            "أتمنى أن يلهمك هذا الاقتباس! لا تتردد في سؤالي عن أي شيء يتعلق "
            "بالاقتباسات أو حكمة الحياة."
        ),
        system_prompt=(
            "أنت مساعد حكيم وملهم يساعد الناس بالاقتباسات وحكمة الحياة. أجب باللغة العربية."
        ),
    ),
    "ckb": LanguageConfig(
        code="ckb",
        name="Sorani Kurdish",
        direction="rtl",
        fallback_prefix="ئەمە وتەیەکی باشە بۆت:",
        fallback_suffix=(
            "هیوادارم ئەم وتەیە ئیلهامت بدات! دڵنیابە لە پرسیاری هەرچی لەبارەی "
            "وتە و دانایی ژیان."
        ),
        system_prompt=(
            "تۆ یارمەتیدەرێکی دانا و ئیلهامبەخشیت کە خەڵک لەگەڵ وتە و دانایی ژیان "
            "یارمەتیدەدەیت. بە کوردی سۆرانی وەڵام بدەرەوە."
        ),
    ),
}


def get_language(code: str | None) -> LanguageConfig:
    """Look up a language, falling back to English for unknown codes."""
    if not isinstance(code, str):
        return LANGUAGES[DEFAULT_LANGUAGE]
    return LANGUAGES.get(code, LANGUAGES[DEFAULT_LANGUAGE])
