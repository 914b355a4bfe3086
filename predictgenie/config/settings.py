"""
Configuration settings for the PredictGenie pricing assistant.
Loads environment variables from a .env file via python-dotenv.
Expose a single `settings` object for the rest of the codebase to import.
"""

from __future__ import annotations


import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


from dotenv import load_dotenv


# Load .env from project root (caller should ensure working dir is project root)
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    # Credentials (checked when the LLM client is built, not at import)
    OPENAI_API_KEY: Optional[str] = None

    # Azure OpenAI (used instead of api.openai.com when an endpoint is set)
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_API_VERSION: str = "2025-03-01-preview"

    # Model call defaults
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.5
    OPENAI_TIMEOUT: int = 120  # seconds
    ENABLE_WEB_SEARCH: bool = True

    # Logging / output
    LOGS_DIR: str = "logs"
    DATA_DIR: str = "data"


def _load_settings_from_env() -> Settings:
    api_key = (
        os.getenv("OPENAI_API_KEY")
        or os.getenv("AZURE_OPENAI_KEY")
        or os.getenv("API_KEY")
    )

    return Settings(
        OPENAI_API_KEY=api_key,
        AZURE_OPENAI_ENDPOINT=os.getenv("AZURE_OPENAI_ENDPOINT") or None,
        AZURE_API_VERSION=os.getenv("AZURE_API_VERSION", "2025-03-01-preview"),
        OPENAI_MODEL=(
            os.getenv("OPENAI_MODEL")
            or os.getenv("AZURE_OPENAI_DEPLOYMENT")
            or "gpt-4o-mini"
        ),
        OPENAI_TEMPERATURE=float(os.getenv("OPENAI_TEMPERATURE", "0.5")),
        OPENAI_TIMEOUT=int(os.getenv("OPENAI_TIMEOUT", "120")),
        ENABLE_WEB_SEARCH=_env_flag("ENABLE_WEB_SEARCH", "true"),
        LOGS_DIR=os.getenv("LOGS_DIR", "logs"),
        DATA_DIR=os.getenv("DATA_DIR", "data"),
    )


def require_api_key(current: Optional[Settings] = None) -> str:
    """Return the configured API key or fail with a pointer to the env var."""
    current = current or settings
    if not current.OPENAI_API_KEY:
        raise RuntimeError(
            "OPENAI_API_KEY not found in environment. Please add it to your .env or env vars."
        )
    return current.OPENAI_API_KEY


# Singleton settings object importable across the codebase
settings = _load_settings_from_env()
Path(settings.LOGS_DIR).mkdir(parents=True, exist_ok=True)
