import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from neurofuel.errors import ConfigError


TRUTHY = ("1", "true")


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    use_mock: bool = False
    gpt_id: Optional[str] = None
    model: str = "gpt-4o-mini"
    request_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def has_key(self) -> bool:
        return bool(self.openai_api_key)

    def should_mock(self, requested: bool = False) -> bool:
        """Mock when forced by env, asked for by the caller, or no key exists."""
        return self.use_mock or requested or not self.has_key


def is_truthy(value) -> bool:
    return value in TRUTHY


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings() -> Settings:
    load_dotenv()

    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        use_mock=is_truthy(os.getenv("USE_MOCK")),
        gpt_id=os.getenv("GPT_ID") or None,
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        request_timeout=_float_env("OPENAI_TIMEOUT", 30.0),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 3000),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
