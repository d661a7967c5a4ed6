"""
SP Research Copilot — Report Normalizer

Turns whatever JSON the model returned into a fully populated ResearchReport.
Total over any input shape: missing sections, nulls, wrong types and single
strings where a list was expected all fall back to defaults. Never raises.
"""

import json
from typing import Any

from copilot.models import (
    BusinessSnapshot,
    DistributionAndPricing,
    OutreachPitch,
    QualityAndReviews,
    ResearchReport,
)

DEFAULT_NAME = "Unknown Business"
DEFAULT_INDUSTRY = "Not specified"
DEFAULT_LOCATION = "Not specified"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_RATING = "N/A"
DEFAULT_RATING_EXPLANATION = "Rating explanation not available"
DEFAULT_MARKET_POSITION = "Not specified"
DEFAULT_CONTACT_EMAIL = "N/A"


def _section(raw: Any, key: str) -> dict:
    """Return raw[key] if it is an object, else an empty dict."""
    if not isinstance(raw, dict):
        return {}
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _text(section: dict, key: str, default: str) -> str:
    """Scalar field: falsy (missing, null, "", 0, []) takes the default."""
    value = section.get(key)
    if not value:
        return default
    return _as_text(value)


def _text_list(section: dict, key: str) -> list[str]:
    """List field: only a real JSON array survives; null items are dropped."""
    value = section.get(key)
    if not isinstance(value, list):
        return []
    return [_as_text(item) for item in value if item is not None]


def normalize_report(raw: Any) -> ResearchReport:
    """
    Fill every ResearchReport field from loosely-shaped model output.

    Args:
        raw: Parsed JSON from the model (normally a dict, but anything is accepted).

    Returns:
        A ResearchReport with every field present and every list field a list.
    """
    snapshot = _section(raw, "businessSnapshot")
    quality = _section(raw, "qualityAndReviews")
    distribution = _section(raw, "distributionAndPricing")
    outreach = _section(raw, "outreachPitch")

    return ResearchReport(
        business_snapshot=BusinessSnapshot(
            name=_text(snapshot, "name", DEFAULT_NAME),
            industry=_text(snapshot, "industry", DEFAULT_INDUSTRY),
            location=_text(snapshot, "location", DEFAULT_LOCATION),
            description=_text(snapshot, "description", DEFAULT_DESCRIPTION),
        ),
        quality_and_reviews=QualityAndReviews(
            overall_rating=_text(quality, "overallRating", DEFAULT_RATING),
            rating_explanation=_text(quality, "ratingExplanation", DEFAULT_RATING_EXPLANATION),
            review_highlights=_text_list(quality, "reviewHighlights"),
            quality_indicators=_text_list(quality, "qualityIndicators"),
            negative_indicators=_text_list(quality, "negativeIndicators"),
        ),
        distribution_and_pricing=DistributionAndPricing(
            distribution_channels=_text_list(distribution, "distributionChannels"),
            pricing_signals=_text_list(distribution, "pricingSignals"),
            market_position=_text(distribution, "marketPosition", DEFAULT_MARKET_POSITION),
        ),
        outreach_pitch=OutreachPitch(
            contact_email=_text(outreach, "contactEmail", DEFAULT_CONTACT_EMAIL),
            similar_sps=_text_list(outreach, "similarSPs"),
        ),
    )
