"""
SP Research Copilot — Central Configuration

All environment variables and LLM settings live here.
Import `settings`, `LLM_CONFIG`, `log`, and `generate_error_code` from this module.
Do not read `os.environ` anywhere else.
"""

import uuid
from datetime import datetime, timezone

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All environment variables. Loaded from .env or the host's env vars."""

    # LLM Provider — empty means "not configured", checked per request
    openai_api_key: str = ""
    research_model: str = "openai/gpt-4o-mini"

    # App
    environment: str = "development"  # "development" | "production" | "test"
    cors_origins: str = "http://localhost:3000"  # Comma-separated for multiple origins
    api_base_url: str = "http://localhost:8000"  # Where the research page sends requests

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import this everywhere
settings = Settings()


# ──────────────────────────────────────────────────────
# Logging Utilities (structured print)
# ──────────────────────────────────────────────────────

def generate_error_code() -> str:
    """Generate a short, user-friendly error reference code.

    Format: 'SP-' followed by 6 uppercase hex characters.
    Example: 'SP-3F8A2C'

    The same code is logged on the backend AND returned in the error body,
    so a BDM can quote it and the team can grep logs for it.
    """
    return f"SP-{uuid.uuid4().hex[:6].upper()}"


def log(level: str, message: str, **context) -> None:
    """Structured print-based logger.

    Every log line follows the format:
        [ISO_TIMESTAMP] [LEVEL] message | key1=value1 key2=value2

    Args:
        level: One of "INFO", "WARN", "ERROR".
        message: Human-readable description of what happened.
        **context: Arbitrary key-value pairs (request_id, model, error_code...).

    Usage:
        log("INFO", "research started", input_length=12)
        log("ERROR", "llm call failed", model="openai/gpt-4o-mini",
            error_code="SP-3F8A2C", error=str(e))
    """
    ts = datetime.now(timezone.utc).isoformat()
    ctx = " ".join(f"{k}={v}" for k, v in context.items())
    print(f"[{ts}] [{level}] {message} | {ctx}", flush=True)


# ──────────────────────────────────────────────────────
# LLM Configuration
# ──────────────────────────────────────────────────────

# One call per request: no fallback chain, no retry, provider-default timeout.
LLM_CONFIG = {
    "temperature": 0.7,
    "response_format": {"type": "json_object"},
}
