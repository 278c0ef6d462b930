from functools import lru_cache
import os
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    upstream_api_key: Optional[str] = Field(
        default=None,
        description="Bearer credential for the upstream chat-completion API",
    )
    upstream_base_url: str = Field(
        default="https://models.inference.ai.azure.com",
        description="OpenAI-compatible base URL of the upstream API",
    )
    model_id: str = Field(default="gpt-4o-mini", description="Upstream model identifier")
    temperature: float = Field(default=0.7)
    max_tokens: int = Field(default=500)
    upstream_timeout: float = Field(
        default=30.0,
        description="Timeout (in seconds) for requests to the upstream API",
    )
    max_turns: int = Field(default=20, description="Turns retained per conversation")
    session_ttl_seconds: int = Field(default=3600)
    reap_interval_seconds: float = Field(default=3600.0)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=10000)
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    frontend_dir: Optional[str] = Field(
        default=None,
        description="Directory with static frontend files served at /",
    )

    class Config:
        frozen = True


def _split_origins(raw: Optional[str], default: List[str]) -> List[str]:
    if not raw:
        return list(default)
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or list(default)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""

    load_dotenv(find_dotenv(usecwd=True))
    defaults = Settings()
    return Settings(
        upstream_api_key=os.getenv("GITHUB_TOKEN") or None,
        upstream_base_url=os.getenv("UPSTREAM_BASE_URL", defaults.upstream_base_url),
        model_id=os.getenv("UPSTREAM_MODEL", defaults.model_id),
        upstream_timeout=float(
            os.getenv("UPSTREAM_TIMEOUT", defaults.upstream_timeout)
        ),
        host=os.getenv("HOST", defaults.host),
        port=int(os.getenv("PORT", defaults.port)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS"), defaults.cors_origins),
        frontend_dir=os.getenv("FRONTEND_DIR") or None,
    )
