"""Application settings from environment."""
import os
from functools import lru_cache

from app.core.errors import ConfigError

DEFAULT_MODEL = "meta/llama3-8b-instruct"


@lru_cache
def get_settings() -> "Settings":
    return Settings()


def _clamped_float(name: str, default: float, low: float, high: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        return max(low, min(high, float(raw)))
    except ValueError:
        return default


class Settings:
    """Central config. Load .env in main/run_api before using. Properties read env at access time."""

    # Completion API (NVIDIA NIM, OpenAI-compatible)
    @property
    def nvidia_api_key(self) -> str:
        return os.getenv("NVIDIA_API_KEY", "").strip()

    @property
    def nvidia_model(self) -> str:
        return (os.getenv("NVIDIA_MODEL", "") or "").strip() or DEFAULT_MODEL

    @property
    def llm_temperature(self) -> float:
        return _clamped_float("LLM_TEMPERATURE", 0.2, 0.0, 2.0)

    @property
    def completion_timeout_seconds(self) -> float:
        return _clamped_float("COMPLETION_TIMEOUT_SECONDS", 30.0, 1.0, 300.0)

    def require_api_key(self) -> str:
        """Return the completion API key or raise ConfigError if it is not set."""
        key = self.nvidia_api_key
        if not key:
            raise ConfigError("NVIDIA_API_KEY is not set (environment or .env)")
        return key

    # Business profiles: JSON document mapping industry key -> profile
    @property
    def business_profiles_path(self) -> str:
        return os.getenv("BUSINESS_PROFILES_PATH", "config.json").strip() or "config.json"

    # Server
    @property
    def app_env(self) -> str:
        return os.getenv("APP_ENV", "development").strip() or "development"

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    @property
    def host(self) -> str:
        return os.getenv("HOST", "127.0.0.1").strip() or "127.0.0.1"

    @property
    def port(self) -> int:
        raw = os.getenv("PORT", "3001").strip()
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"Invalid integer for PORT: {raw!r}") from None

    # API
    @property
    def api_title(self) -> str:
        return os.getenv("API_TITLE", "Lead Qualification Relay").strip()

    @property
    def api_version(self) -> str:
        return os.getenv("API_VERSION", "0.1.0").strip()

    # CORS: comma-separated origins (e.g. http://localhost:3000) or * for all
    @property
    def cors_origins(self) -> list[str]:
        raw = os.getenv("CORS_ORIGINS", "*").strip()
        if not raw or raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]
