"""
SP Research Copilot — Research Page (Gradio)

Form-and-results page mounted at "/". It calls POST /api/research over HTTP
once per submission and renders the returned report into four sections.

Page state is a single value, one of Idle / Loading / Success / Error, so
"loading and error at the same time" cannot be represented. Rendering is a
pure function of that value.
"""

import re
from dataclasses import dataclass
from typing import AsyncIterator, Union

import gradio as gr
import httpx

from copilot.config import log, settings

TITLE = "SP Research Copilot"
SUBTITLE = "Internal tool for BDMs to research businesses"
INPUT_LABEL = "Business Name, Website, or Google Maps Link"
INPUT_PLACEHOLDER = "e.g., Acme Restaurant, https://example.com, or https://maps.google.com/..."

EMPTY_INPUT_MESSAGE = "Please enter a business name, website, or Google Maps link"
SERVER_FAILURE_MESSAGE = "Failed to fetch research"
UNKNOWN_FAILURE_MESSAGE = "An error occurred"

SUBMIT_LABEL = "Submit"
LOADING_LABEL = "Researching..."
MISSING_VALUE = "N/A"


# ============================================================================
# STATE
# ============================================================================

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    input: str


@dataclass(frozen=True)
class Success:
    report: dict


@dataclass(frozen=True)
class Error:
    message: str


PageState = Union[Idle, Loading, Success, Error]


# ============================================================================
# REQUEST
# ============================================================================

def _make_client() -> httpx.AsyncClient:
    # No application-level timeout: the request waits as long as the provider does.
    return httpx.AsyncClient(base_url=settings.api_base_url, timeout=None)


async def fetch_research(user_input: str) -> PageState:
    """POST the trimmed input to the research endpoint; map the outcome to a state."""
    try:
        async with _make_client() as client:
            response = await client.post("/api/research", json={"input": user_input})
    except Exception as e:
        log("ERROR", "research page request failed", error=str(e))
        return Error(str(e) or UNKNOWN_FAILURE_MESSAGE)

    try:
        data = response.json()
    except ValueError:
        data = None

    if not response.is_success:
        message = data.get("error") if isinstance(data, dict) else None
        log("WARN", "research page got error response", status=response.status_code)
        return Error(message or SERVER_FAILURE_MESSAGE)

    if not isinstance(data, dict):
        return Error(UNKNOWN_FAILURE_MESSAGE)
    return Success(data)


async def run_submission(text: str) -> AsyncIterator[PageState]:
    """
    Yield the state sequence for one submit.

    Blank input yields a single Error without contacting the server.
    Otherwise yields Loading, then Success or Error.
    """
    user_input = (text or "").strip()
    if not user_input:
        yield Error(EMPTY_INPUT_MESSAGE)
        return

    yield Loading(user_input)
    yield await fetch_research(user_input)


# ============================================================================
# RENDERING
# ============================================================================

_MD_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+!|<>~])")


def _escape(value) -> str:
    """Escape model-authored text so it renders literally inside Markdown."""
    return _MD_SPECIAL.sub(r"\\\1", str(value))


def _field(label: str, value) -> str:
    return f"**{label}:** {_escape(value) if value else MISSING_VALUE}"


def _bullets(label: str, items, placeholder: str) -> str:
    lines = [f"**{label}:**", ""]
    if isinstance(items, list) and items:
        lines.extend(f"- {_escape(item)}" for item in items)
    else:
        lines.append(f"- *{placeholder}*")
    return "\n".join(lines)


def render_snapshot(section: dict) -> str:
    return "\n\n".join([
        "## 1. Business Snapshot",
        _field("Name", section.get("name")),
        _field("Industry", section.get("industry")),
        _field("Location", section.get("location")),
        _field("Description", section.get("description")),
    ])


def render_quality(section: dict) -> str:
    explanation = section.get("ratingExplanation")
    return "\n\n".join([
        "## 2. Quality & Reviews (AI Generated)",
        _field("Overall Rating", section.get("overallRating")),
        "**Rating Explanation:**",
        f"> {_escape(explanation) if explanation else 'No explanation available'}",
        _bullets("Review Highlights", section.get("reviewHighlights"), "No highlights available"),
        _bullets("Quality Indicators", section.get("qualityIndicators"), "No indicators available"),
        _bullets("Negative Indicators", section.get("negativeIndicators"), "No negative indicators found"),
    ])


def render_distribution(section: dict) -> str:
    return "\n\n".join([
        "## 3. Distribution & Pricing Signals",
        _bullets("Distribution Channels", section.get("distributionChannels"), "No channels available"),
        _bullets("Pricing Signals", section.get("pricingSignals"), "No pricing signals available"),
        _field("Market Position", section.get("marketPosition")),
    ])


def render_outreach(section: dict) -> str:
    return "\n\n".join([
        "## 4. Outreach Pitch",
        _field("Contact Email", section.get("contactEmail")),
        _bullets("Similar Service Providers", section.get("similarSPs"), "No similar SPs found"),
    ])


_SECTIONS = [
    ("businessSnapshot", render_snapshot),
    ("qualityAndReviews", render_quality),
    ("distributionAndPricing", render_distribution),
    ("outreachPitch", render_outreach),
]


def render_report(report: dict) -> list[str]:
    """
    Render the four sections. A section whose object is absent renders as "".
    Nothing renders unless businessSnapshot is present.
    """
    if not isinstance(report.get("businessSnapshot"), dict):
        return ["" for _ in _SECTIONS]
    rendered = []
    for key, render in _SECTIONS:
        section = report.get(key)
        rendered.append(render(section) if isinstance(section, dict) else "")
    return rendered


@dataclass(frozen=True)
class PageView:
    """Everything the page shows, derived from one PageState."""

    busy: bool
    error: str | None
    sections: list[str]

    @property
    def has_report(self) -> bool:
        return any(self.sections)


def view_for(state: PageState) -> PageView:
    if isinstance(state, Loading):
        return PageView(busy=True, error=None, sections=["", "", "", ""])
    if isinstance(state, Error):
        return PageView(busy=False, error=state.message, sections=["", "", "", ""])
    if isinstance(state, Success):
        return PageView(busy=False, error=None, sections=render_report(state.report))
    return PageView(busy=False, error=None, sections=["", "", "", ""])


# ============================================================================
# GRADIO WIRING
# ============================================================================

def _outputs_for(state: PageState) -> tuple:
    view = view_for(state)
    return (
        state,
        gr.update(visible=view.error is not None),
        f"⚠️ {_escape(view.error)}" if view.error else "",
        gr.update(visible=view.has_report),
        *view.sections,
        gr.update(interactive=not view.busy),
        gr.update(interactive=not view.busy, value=LOADING_LABEL if view.busy else SUBMIT_LABEL),
    )


async def _on_submit(text: str, _state: PageState):
    async for state in run_submission(text):
        yield _outputs_for(state)


def _on_dismiss(_state: PageState) -> tuple:
    return _outputs_for(Idle())


def build_page() -> gr.Blocks:
    """Build the research page. Mounted onto the FastAPI app in main.py."""
    with gr.Blocks(title=TITLE) as page:
        gr.Markdown(f"# {TITLE}\n{SUBTITLE}")

        page_state = gr.State(value=Idle())

        with gr.Group():
            input_box = gr.Textbox(label=INPUT_LABEL, placeholder=INPUT_PLACEHOLDER, lines=1)
            submit_btn = gr.Button(SUBMIT_LABEL, variant="primary")

        with gr.Column(visible=False) as error_box:
            error_md = gr.Markdown()
            dismiss_btn = gr.Button("Dismiss", size="sm", variant="secondary")

        with gr.Column(visible=False) as report_box:
            snapshot_md = gr.Markdown()
            quality_md = gr.Markdown()
            distribution_md = gr.Markdown()
            outreach_md = gr.Markdown()

        outputs = [
            page_state,
            error_box,
            error_md,
            report_box,
            snapshot_md,
            quality_md,
            distribution_md,
            outreach_md,
            input_box,
            submit_btn,
        ]

        # Each browser session runs its own request; no global queue serialization.
        submit_btn.click(fn=_on_submit, inputs=[input_box, page_state], outputs=outputs, concurrency_limit=None)
        input_box.submit(fn=_on_submit, inputs=[input_box, page_state], outputs=outputs, concurrency_limit=None)
        dismiss_btn.click(fn=_on_dismiss, inputs=[page_state], outputs=outputs)

    return page
