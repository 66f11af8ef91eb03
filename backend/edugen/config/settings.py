"""
Engine Settings

Environment-driven settings (``.env`` supported) validated by pydantic, plus
the optional YAML file ``config/default.yaml`` for runtime tuning that does not
belong in the environment (Redis key prefixes, logging format).

Usage:
    from edugen.config import settings, yaml_config

    settings.DEFAULT_MODEL          # first choice of every model chain
    yaml_config["redis"]["store_prefix"]
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

# <repo>/config/default.yaml
YAML_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"


class Settings(BaseSettings):
    """Engine settings; every field can be overridden by an env variable of the same name."""

    APP_NAME: str = "Edu Exercise Engine"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Backs the exercise cache and the exercise store
    REDIS_URL: str = "redis://localhost:6379/0"

    # Provider credentials; LiteLLM also picks these up from the environment
    CLOUDFLARE_API_KEY: str = ""
    CLOUDFLARE_ACCOUNT_ID: str = ""
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    # Model chain, LiteLLM "provider/model" ids.
    # DEFAULT_MODEL follows any preferred model; LIGHT_MODEL is always last.
    DEFAULT_MODEL: str = "cloudflare/@cf/meta/llama-3.2-3b-instruct"
    QUALITY_MODEL: str = "cloudflare/@cf/meta/llama-3.1-8b-instruct-fast"
    REASONING_MODEL: str = "cloudflare/@cf/qwen/qwq-32b"
    LIGHT_MODEL: str = "cloudflare/@cf/meta/llama-3.2-1b-instruct"

    GENERATION_MAX_TOKENS: int = Field(2000, gt=0)
    GENERATION_TEMPERATURE: float = Field(0.7, ge=0, le=2)

    MAX_EXERCISES_PER_REQUEST: int = Field(10, ge=1)
    CACHE_TTL_SECONDS: int = Field(86400, gt=0)  # 24h
    EXERCISE_STORE_TTL_SECONDS: int = Field(604800, gt=0)  # 7 days

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Parse config/default.yaml; an absent file means no overrides."""
    if not YAML_CONFIG_PATH.exists():
        return {}
    return yaml.safe_load(YAML_CONFIG_PATH.read_text()) or {}


yaml_config: dict[str, Any] = load_yaml_config()
