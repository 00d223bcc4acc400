"""Application settings loaded from environment variables (and .env)."""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


@dataclass
class Settings:
    """Read once at startup; business code receives values, not the environment."""

    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    quotes_path: str = field(default_factory=lambda: os.getenv("QUOTES_PATH", "quotes.json"))
    ai_provider: str = field(default_factory=lambda: os.getenv("AI_PROVIDER", "gemini").lower())
    gemini_api_key: str | None = field(default_factory=lambda: os.getenv("GEMINI_API_KEY") or None)
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))
    provider_timeout_s: float = field(default_factory=lambda: _env_float("PROVIDER_TIMEOUT_S", 30.0))
    max_page_size: int = field(default_factory=lambda: _env_int("MAX_PAGE_SIZE", 100))
    allowed_origin: str = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGIN", "http://localhost:8080")
    )
    rate_limit_max: int = field(default_factory=lambda: _env_int("RATE_LIMIT_MAX", 100))
    rate_limit_window_s: int = field(default_factory=lambda: _env_int("RATE_LIMIT_WINDOW_S", 15 * 60))
    chat_rate_limit_max: int = field(default_factory=lambda: _env_int("CHAT_RATE_LIMIT_MAX", 20))
    chat_rate_limit_window_s: int = field(
        default_factory=lambda: _env_int("CHAT_RATE_LIMIT_WINDOW_S", 5 * 60)
    )
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings()
