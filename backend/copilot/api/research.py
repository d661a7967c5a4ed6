"""
SP Research Copilot — Research API (POST /api/research)

Validate input → check credential → one LLM call → parse JSON → normalize.
Any failure short-circuits to a JSON error body; there is no partial result.
"""

import time

from fastapi import APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from copilot import llm, prompts
from copilot.config import generate_error_code, log, settings
from copilot.llm import LLMError, LLMParseError
from copilot.models import ErrorResponse, ResearchReport, ResearchRequest
from copilot.normalize import normalize_report

router = APIRouter(prefix="/api/research", tags=["research"])

INPUT_REQUIRED_MESSAGE = "Input is required"
API_KEY_MISSING_MESSAGE = "OpenAI API key not configured"
GENERIC_FAILURE_MESSAGE = "Failed to generate research summary"


def _error_response(status_code: int, message: str, error_code: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, error_code=error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies (not JSON, not an object, non-string input) count as missing input."""
    log(
        "WARN",
        "research request rejected",
        path=request.url.path,
        reason="invalid body",
        errors=len(exc.errors()),
    )
    return _error_response(400, INPUT_REQUIRED_MESSAGE)


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post(
    "",
    response_model=ResearchReport,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def research(body: ResearchRequest, request: Request):
    """
    POST /api/research

    Body: { "input": string }
    Returns the normalized ResearchReport, or { "error": ... } with 400/500.
    """
    request_id = request.headers.get("X-Request-Id", "none")
    user_input = (body.input or "").strip()

    if not user_input:
        log("WARN", "research request rejected", request_id=request_id, reason="empty input")
        return _error_response(400, INPUT_REQUIRED_MESSAGE)

    if not settings.openai_api_key:
        code = generate_error_code()
        log("ERROR", "openai api key not configured", request_id=request_id, error_code=code)
        return _error_response(500, API_KEY_MISSING_MESSAGE, code)

    start = time.perf_counter()
    log("INFO", "research started", request_id=request_id, input=user_input[:50])

    try:
        report = await generate_research(user_input, request_id=request_id)
    except LLMParseError as e:
        code = generate_error_code()
        log("ERROR", "research failed", request_id=request_id, stage="parse", error_code=code)
        return _error_response(500, str(e), code)
    except LLMError as e:
        code = generate_error_code()
        log("ERROR", "research failed", request_id=request_id, stage="generate", error=str(e), error_code=code)
        return _error_response(500, str(e) or GENERIC_FAILURE_MESSAGE, code)
    except Exception as e:
        code = generate_error_code()
        log("ERROR", "research failed", request_id=request_id, stage="unknown", error=str(e), error_code=code)
        return _error_response(500, str(e) or GENERIC_FAILURE_MESSAGE, code)

    log(
        "INFO",
        "research completed",
        request_id=request_id,
        business=report.business_snapshot.name[:50],
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return report


async def generate_research(user_input: str, request_id: str | None = None) -> ResearchReport:
    """
    Run the research pipeline for an already-trimmed, non-empty input.

    Raises:
        LLMError: Provider call failed or returned nothing.
        LLMParseError: Reply was not a JSON object.
    """
    raw = await llm.call_llm(prompts.build_research_prompt(user_input), request_id=request_id)
    parsed = llm.parse_json_object(raw, request_id=request_id)
    return normalize_report(parsed)
