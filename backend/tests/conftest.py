"""
SP Research Copilot — Shared Test Fixtures

Provides mocked versions of the LLM provider and HTTP clients wired to the
ASGI app, for deterministic, fast unit tests. No real network calls.
"""

import copy
import json
import os
import sys
from dataclasses import dataclass
from typing import Optional
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport

# Ensure copilot package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


# -----------------------------------------------------------------------------
# Environment Setup (before importing copilot modules)
# -----------------------------------------------------------------------------

os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")


# -----------------------------------------------------------------------------
# Mock Response Classes
# -----------------------------------------------------------------------------


@dataclass
class MockLLMMessage:
    """Mock message from LLM response."""
    content: Optional[str]


@dataclass
class MockLLMChoice:
    """Mock choice from LLM response."""
    message: MockLLMMessage


@dataclass
class MockLLMUsage:
    """Mock usage stats from LLM response."""
    total_tokens: int = 100
    prompt_tokens: int = 50
    completion_tokens: int = 50


@dataclass
class MockLLMResponse:
    """Mock LLM completion response."""
    choices: list[MockLLMChoice]
    usage: MockLLMUsage = None

    def __post_init__(self):
        if self.usage is None:
            self.usage = MockLLMUsage()


def create_mock_llm_response(content: Optional[str]) -> MockLLMResponse:
    """Create a mock LLM response with given content."""
    return MockLLMResponse(
        choices=[MockLLMChoice(message=MockLLMMessage(content=content))]
    )


# -----------------------------------------------------------------------------
# Mock Data Fixtures
# -----------------------------------------------------------------------------


COMPLETE_REPORT = {
    "businessSnapshot": {
        "name": "Acme Bakery",
        "industry": "Food & Beverage",
        "location": "Austin, TX",
        "description": "Neighborhood bakery known for sourdough and custom cakes.",
    },
    "qualityAndReviews": {
        "overallRating": "4.6/5",
        "ratingExplanation": (
            "Based on roughly 820 reviews across Google Reviews, Yelp and Facebook. "
            "The rating is a review-count weighted average of the three platforms. "
            "Reviewers consistently praise freshness; complaints cluster around weekend wait times."
        ),
        "reviewHighlights": ["Best sourdough in town", "Friendly staff"],
        "qualityIndicators": ["Fresh daily baking", "Locally sourced flour"],
        "negativeIndicators": ["Long weekend queues"],
    },
    "distributionAndPricing": {
        "distributionChannels": ["Storefront", "Local delivery apps", "Farmers markets"],
        "pricingSignals": ["Premium pricing on custom cakes", "Mid-range everyday bread"],
        "marketPosition": "Premium local artisan bakery",
    },
    "outreachPitch": {
        "contactEmail": "partnerships@acmebakery.com",
        "similarSPs": ["Sweet Crumb Bakehouse", "Rise & Shine Bakery"],
    },
}


@pytest.fixture
def complete_report() -> dict:
    """A complete, schema-valid report as the model would return it."""
    return copy.deepcopy(COMPLETE_REPORT)


# -----------------------------------------------------------------------------
# LLM Mocking Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_llm(monkeypatch):
    """
    Mock litellm.acompletion to return the complete report.

    Returns the mock function so tests can customize responses.
    """
    async def mock_acompletion(*args, **kwargs) -> MockLLMResponse:
        return create_mock_llm_response(json.dumps(COMPLETE_REPORT))

    mock = AsyncMock(side_effect=mock_acompletion)
    monkeypatch.setattr("litellm.acompletion", mock)
    return mock


@pytest.fixture
def mock_llm_with_response(monkeypatch):
    """
    Factory fixture to mock LLM with a specific JSON-serializable response.

    Usage:
        def test_example(mock_llm_with_response):
            mock = mock_llm_with_response({"key": "value"})
    """
    def _create_mock(response_data):
        async def mock_acompletion(*args, **kwargs) -> MockLLMResponse:
            return create_mock_llm_response(json.dumps(response_data))

        mock = AsyncMock(side_effect=mock_acompletion)
        monkeypatch.setattr("litellm.acompletion", mock)
        return mock

    return _create_mock


@pytest.fixture
def mock_llm_with_content(monkeypatch):
    """Factory fixture to mock LLM with raw (possibly non-JSON) content."""
    def _create_mock(content: Optional[str]):
        async def mock_acompletion(*args, **kwargs) -> MockLLMResponse:
            return create_mock_llm_response(content)

        mock = AsyncMock(side_effect=mock_acompletion)
        monkeypatch.setattr("litellm.acompletion", mock)
        return mock

    return _create_mock


@pytest.fixture
def mock_llm_failure(monkeypatch):
    """Mock LLM to simulate the provider call failing."""
    async def mock_acompletion(*args, **kwargs):
        raise Exception("Rate limit exceeded")

    mock = AsyncMock(side_effect=mock_acompletion)
    monkeypatch.setattr("litellm.acompletion", mock)
    return mock


@pytest.fixture
def no_api_key(monkeypatch):
    """Simulate a deployment without OPENAI_API_KEY."""
    from copilot.config import settings
    monkeypatch.setattr(settings, "openai_api_key", "")


# -----------------------------------------------------------------------------
# HTTP Client Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
async def client():
    """Async HTTP client for testing FastAPI endpoints."""
    from copilot.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def page_backend(monkeypatch):
    """Route the research page's HTTP calls into the in-process ASGI app."""
    from copilot.main import app

    def _make_client() -> AsyncClient:
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    monkeypatch.setattr("copilot.page._make_client", _make_client)
    return app
