import os
from dataclasses import dataclass

from dotenv import load_dotenv
load_dotenv()


PLACEHOLDER_API_KEY = "your_openai_api_key_here"

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_SECONDS = 9.0
DEFAULT_TEMPERATURE = 0.7


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None = None
    openai_base_url: str = DEFAULT_BASE_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    temperature: float = DEFAULT_TEMPERATURE
    log_level: str = "INFO"

    @property
    def has_credential(self) -> bool:
        key = (self.openai_api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


def get_settings() -> Settings:
    """Read settings from the environment (and .env) on every call."""
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL,
        chat_model=os.getenv("OPENAI_MODEL", DEFAULT_CHAT_MODEL).strip() or DEFAULT_CHAT_MODEL,
        timeout_seconds=_float_env("PLAN_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        temperature=_float_env("PLAN_TEMPERATURE", DEFAULT_TEMPERATURE),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
