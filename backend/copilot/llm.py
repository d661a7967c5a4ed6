"""
SP Research Copilot — LLM Interactions

One completion call per research request via litellm, then strict JSON
parsing of the reply. No fallback chain, no retry, no repair prompt.
"""

import json
import time
import warnings

import litellm

from copilot.config import LLM_CONFIG, generate_error_code, log, settings

# ── Suppress noisy litellm output ────────────────────────────────────────────
warnings.filterwarnings("ignore", category=DeprecationWarning, module="litellm")
litellm.suppress_debug_info = True
litellm.drop_params = True  # Prevent unsupported-param errors across providers

PARSE_FAILURE_MESSAGE = "Failed to parse OpenAI response. Please try again."
EMPTY_RESPONSE_MESSAGE = "No response from OpenAI"
RAW_LOG_LIMIT = 500


# ─────────────────────────────────────────────────────────────────────────────
# Custom Exceptions
# ─────────────────────────────────────────────────────────────────────────────


class LLMError(Exception):
    """The provider call failed or returned no content."""

    pass


class LLMParseError(Exception):
    """The provider reply was not a JSON object.

    The raw text is kept for logging only; str(exc) is always the fixed
    user-facing message.
    """

    def __init__(self, raw_output: str, error: str):
        self.raw_output = raw_output
        self.error = error
        super().__init__(PARSE_FAILURE_MESSAGE)


# ─────────────────────────────────────────────────────────────────────────────
# Core Functions
# ─────────────────────────────────────────────────────────────────────────────


async def call_llm(messages: list[dict], request_id: str | None = None) -> str:
    """
    Make exactly one chat completion call and return the first choice's text.

    Args:
        messages: Full message list (system + user), see prompts.build_research_prompt.
        request_id: Optional request ID for logging correlation.

    Returns:
        Raw response content string from the LLM.

    Raises:
        LLMError: If the provider raises or returns empty content.
    """
    model = settings.research_model
    log("INFO", "llm call started", request_id=request_id, model=model)
    start = time.perf_counter()

    try:
        response = await litellm.acompletion(
            model=model,
            messages=messages,
            temperature=LLM_CONFIG["temperature"],
            response_format=LLM_CONFIG["response_format"],
            api_key=settings.openai_api_key,
        )
    except Exception as e:
        code = generate_error_code()
        log(
            "ERROR",
            "llm call failed",
            request_id=request_id,
            model=model,
            error=str(e),
            error_code=code,
        )
        raise LLMError(str(e)) from e

    duration_ms = int((time.perf_counter() - start) * 1000)

    content = ""
    if response.choices:
        content = getattr(response.choices[0].message, "content", None) or ""

    tokens_used = None
    if hasattr(response, "usage") and response.usage:
        tokens_used = getattr(response.usage, "total_tokens", None)

    if not content:
        log(
            "WARN",
            "llm returned empty content",
            request_id=request_id,
            model=model,
            duration_ms=duration_ms,
            tokens_used=tokens_used,
        )
        raise LLMError(EMPTY_RESPONSE_MESSAGE)

    log(
        "INFO",
        "llm call succeeded",
        request_id=request_id,
        model=model,
        duration_ms=duration_ms,
        tokens_used=tokens_used,
    )
    return content


def parse_json_object(raw: str, request_id: str | None = None) -> dict:
    """
    Parse the model's reply as a JSON object.

    Raises:
        LLMParseError: If the text is not valid JSON or not an object.
            The raw text is logged (truncated) and never put in the message.
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        _log_parse_failure(raw, str(e), request_id)
        raise LLMParseError(raw_output=raw, error=str(e)) from e

    if not isinstance(parsed, dict):
        error = f"expected JSON object, got {type(parsed).__name__}"
        _log_parse_failure(raw, error, request_id)
        raise LLMParseError(raw_output=raw, error=error)

    return parsed


def _log_parse_failure(raw: str, error: str, request_id: str | None) -> None:
    raw_text = raw if isinstance(raw, str) else repr(raw)
    log(
        "ERROR",
        "llm output parse failed",
        request_id=request_id,
        raw_output=raw_text[:RAW_LOG_LIMIT] + "..." if len(raw_text) > RAW_LOG_LIMIT else raw_text,
        parse_error=error[:300],
        error_code=generate_error_code(),
    )
