"""Data models and types used across the backend.

Request/response and report schemas (pydantic) live in schemas.py.
Snapshot facts are plain dicts typed here; the Snapshot itself and the
generation ladder records are frozen dataclasses.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Literal, Optional, TypedDict

RenderMode = Literal["browser", "static"]


class Headings(TypedDict):
    h1: list[str]
    h2: list[str]
    h3: list[str]


class StructuredData(TypedDict):
    """Content summary produced by the DOM extractor."""

    title: str
    meta_description: str
    headings: Headings
    links: list[dict]
    images: list[dict]
    forms: int
    buttons: list[dict]
    text_content: str


class MobileStructure(TypedDict):
    """Reduced content summary of the mobile-rendered DOM."""

    headings: Headings
    buttons: list[dict]
    links: list[dict]
    forms: int


class StyleAnalysis(TypedDict):
    """Computed-style facts for the desktop render. Every list is capped."""

    links: dict
    form_elements: dict
    error_messages: dict
    spacing: dict
    target_sizes: dict
    interactive_states: dict
    hover_only_info: dict
    animations: dict
    transitions: dict
    color_only_indicators: dict
    ui_components: dict


class ReflowTest(TypedDict):
    viewport_width: int
    viewport_height: int
    client_width: int
    scroll_width: int
    scrollbar_width: int
    has_horizontal_scroll: bool
    meets_reflow_requirement: bool


class ZoomTest(TypedDict):
    zoom_level: float
    original_width: int
    original_height: int
    zoomed_width: int
    zoomed_height: int
    viewport_width: int
    viewport_height: int
    has_horizontal_scroll: bool
    has_vertical_scroll: bool
    meets_zoom_requirement: bool


class MobileData(TypedDict):
    """Facts from the phone-viewport render.

    ``degraded`` is True when only the reduced capture succeeded; then
    ``structured_data`` and ``style_analysis`` are None.
    """

    degraded: bool
    viewport: dict
    touch_targets: dict
    spacing: dict
    responsive: dict
    typography: dict
    text_content: str
    html: str
    structured_data: Optional[MobileStructure]
    style_analysis: Optional[dict]


class StrategyMetrics(TypedDict):
    strategy: str
    scores: dict
    accessibility_audits: dict
    performance_metrics: dict
    final_url: Optional[str]
    user_agent: Optional[str]
    emulated_form_factor: Optional[str]


class ExternalMetrics(TypedDict):
    mobile: Optional[StrategyMetrics]
    desktop: Optional[StrategyMetrics]
    fetched_at: str


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Snapshot:
    """One capture of a page. Optional facts are None, never half-filled."""

    url: str
    html: str
    structured_data: StructuredData
    render_mode: RenderMode
    fetched_at: str = field(default_factory=utc_now_iso)
    style_analysis: Optional[StyleAnalysis] = None
    reflow_test: Optional[ReflowTest] = None
    zoom_test: Optional[ZoomTest] = None
    mobile_data: Optional[MobileData] = None
    external_metrics: Optional[ExternalMetrics] = None
    screenshot: Optional[str] = None
    element_screenshots: Optional[dict[str, str]] = None

    def with_external_metrics(self, metrics: Optional[ExternalMetrics]) -> "Snapshot":
        return replace(self, external_metrics=metrics)


@dataclass(frozen=True)
class GenerationAttempt:
    """One try against a named model."""

    backend: str
    success: bool
    output: str = ""
    failure_reason: Optional[str] = None


@dataclass(frozen=True)
class AttemptLadder:
    """Ordered attempts over candidate models; the first success wins."""

    attempts: tuple[GenerationAttempt, ...] = ()

    @property
    def winner(self) -> Optional[GenerationAttempt]:
        for attempt in self.attempts:
            if attempt.success:
                return attempt
        return None

    @property
    def succeeded(self) -> bool:
        return self.winner is not None

    @property
    def failures(self) -> list[GenerationAttempt]:
        return [a for a in self.attempts if not a.success]

    def failure_summary(self) -> str:
        return "; ".join(f"{a.backend}: {a.failure_reason}" for a in self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.backend if self.winner else None,
            "failures": [
                {"backend": a.backend, "reason": a.failure_reason} for a in self.failures
            ],
        }
