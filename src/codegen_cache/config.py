import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()

STORE_BACKENDS = ("memory", "sqlite", "redis")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Generation provider (OpenAI Responses API)
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_organization: str | None = os.getenv("OPENAI_ORGANIZATION")
    openai_project: str | None = os.getenv("OPENAI_PROJECT")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_model: str = os.getenv("OPENAI_MODEL", "o4-mini")
    # Which output item carries the answer text (reasoning models may emit a
    # reasoning item first). Content block is always the first one.
    openai_output_index: int = int(os.getenv("OPENAI_OUTPUT_INDEX", "0"))
    openai_timeout: float = float(os.getenv("OPENAI_TIMEOUT", "120"))

    # Inbound auth
    service_api_key: str | None = os.getenv("SERVICE_API_KEY")

    # Entry store
    store_backend: str = os.getenv("STORE_BACKEND", "sqlite").lower()
    sqlite_path: str = os.getenv("SQLITE_PATH", "./data.db")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_key_prefix: str = os.getenv("REDIS_KEY_PREFIX", "codegen")

    # Coordinator
    single_flight: bool = os.getenv("SINGLE_FLIGHT", "true").lower() == "true"

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8080"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"STORE_BACKEND must be one of {list(STORE_BACKENDS)}, got {self.store_backend!r}"
            )

        if self.openai_output_index < 0:
            raise ValueError("OPENAI_OUTPUT_INDEX must be >= 0")

        if self.openai_timeout <= 0:
            raise ValueError("OPENAI_TIMEOUT must be positive")

    def require_service_api_key(self) -> str:
        """Return the inbound-auth secret, failing hard if it is not configured.

        Raises:
            RuntimeError: If SERVICE_API_KEY is unset or empty
        """
        if not self.service_api_key:
            raise RuntimeError("Environment variable 'SERVICE_API_KEY' is not set.")
        return self.service_api_key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
