"""
Single source of truth for all Pydantic models (request, report, error body).
Wire names are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------


class ResearchRequest(BaseModel):
    # Optional here so a missing/blank input is reported as 400 by the route,
    # not as a 422 validation error.
    input: Optional[str] = Field(None, description="Business name, website, or map link")


# -----------------------------------------------------------------------------
# Report Models
# -----------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BusinessSnapshot(_WireModel):
    name: str
    industry: str
    location: str
    description: str


class QualityAndReviews(_WireModel):
    overall_rating: str
    rating_explanation: str
    review_highlights: list[str] = []
    quality_indicators: list[str] = []
    negative_indicators: list[str] = []


class DistributionAndPricing(_WireModel):
    distribution_channels: list[str] = []
    pricing_signals: list[str] = []
    market_position: str


class OutreachPitch(_WireModel):
    contact_email: str
    similar_sps: list[str] = Field(default_factory=list, alias="similarSPs")


class ResearchReport(_WireModel):
    """The four-section report returned by POST /api/research."""

    business_snapshot: BusinessSnapshot
    quality_and_reviews: QualityAndReviews
    distribution_and_pricing: DistributionAndPricing
    outreach_pitch: OutreachPitch


# -----------------------------------------------------------------------------
# Error Models
# -----------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    error: str
    error_code: Optional[str] = None
