import os
import logging
from typing import Optional
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT = 45.0


class Settings(BaseModel):
    """Process-wide configuration, built once at start-up and passed to the handler.

    ``bound_api_key`` is the platform binding handed in by hosting code;
    ``env_api_key`` is the GEMINI_API_KEY process variable. Request bodies can
    override both.
    """
    model_config = ConfigDict(frozen=True)

    bound_api_key: Optional[str] = None
    env_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, bound_api_key: Optional[str] = None) -> "Settings":
        return cls(
            bound_api_key=bound_api_key,
            env_api_key=os.getenv("GEMINI_API_KEY"),
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
            request_timeout=os.getenv("GEMINI_TIMEOUT", DEFAULT_TIMEOUT),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=os.getenv("PORT", 8000),
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/v1beta/models/{self.model}:generateContent"


def resolve_api_key(request_key: Optional[str], settings: Settings) -> Optional[str]:
    """
    Returns the first key that is present: request body, platform binding,
    environment. A present but empty key still wins; the caller rejects it.
    """
    for source, key in (
        ("request", request_key),
        ("binding", settings.bound_api_key),
        ("environment", settings.env_api_key),
    ):
        if key is not None:
            logger.debug(f"Using Gemini API key from {source}.")
            return key
    return None
