"""Pydantic schemas for API request/response and the generated report."""

from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from checklist import CHECKLIST_CATALOG, KNOWN_CATEGORIES, to_snake_case

ReportStatus = Literal["good", "warning", "critical"]

_CATALOG_LABELS = {category["key"]: category["label"] for category in CHECKLIST_CATALOG}


class AuditItem(BaseModel):
    """One checklist item; ``instruction`` overrides the default assessment."""

    key: str
    label: str
    selected: bool = True
    instruction: Optional[str] = None

    @field_validator("key", mode="before")
    @classmethod
    def normalize_key(cls, value: object) -> str:
        return to_snake_case(str(value or ""))

    @field_validator("label", mode="before")
    @classmethod
    def normalize_label(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("instruction", mode="before")
    @classmethod
    def normalize_instruction(cls, value: object) -> Optional[str]:
        text = str(value or "").strip()
        return text or None


class AuditCategory(BaseModel):
    """A known checklist category and its items, in display order."""

    key: str
    label: str = Field(default="", validate_default=True)
    items: list[AuditItem] = Field(default_factory=list)

    @field_validator("key", mode="before")
    @classmethod
    def validate_key(cls, value: object) -> str:
        key = to_snake_case(str(value or ""))
        if key not in KNOWN_CATEGORIES:
            raise ValueError(f"Unknown audit category '{value}'. Expected one of: {', '.join(KNOWN_CATEGORIES)}")
        return key

    @field_validator("label", mode="before")
    @classmethod
    def default_label(cls, value: object, info: ValidationInfo) -> str:
        label = str(value or "").strip()
        return label or _CATALOG_LABELS.get(info.data.get("key", ""), "")


def _categories_from_mapping(options: dict) -> list[dict]:
    """``{categoryKey: {title, items: {itemKey: {label, checked, prompt}}}}`` to the list form."""
    categories = []
    for category_key, category in options.items():
        category = category or {}
        items = category.get("items") or []
        if isinstance(items, dict):
            items = [
                {
                    "key": item_key,
                    "label": (item or {}).get("label") or item_key,
                    "selected": bool((item or {}).get("checked", (item or {}).get("selected", False))),
                    "instruction": (item or {}).get("prompt") or (item or {}).get("instruction"),
                }
                for item_key, item in items.items()
            ]
        categories.append(
            {
                "key": category_key,
                "label": category.get("title") or category.get("label") or "",
                "items": items,
            }
        )
    return categories


class AuditRequest(BaseModel):
    """Request body for POST /api/audit."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    audit_options: list[AuditCategory] = Field(default_factory=list, alias="auditOptions")
    model: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, value: object) -> str:
        url = str(value or "").strip()
        if not url:
            raise ValueError("URL is required")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("URL must be an absolute http(s) URL")
        return url

    @field_validator("audit_options", mode="before")
    @classmethod
    def normalize_audit_options(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, dict):
            return _categories_from_mapping(value)
        return value

    @field_validator("model", mode="before")
    @classmethod
    def normalize_model(cls, value: object) -> Optional[str]:
        text = str(value or "").strip()
        return text or None


class ReportItem(BaseModel):
    """Assessment of one checklist item."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    status: ReportStatus
    findings: str = ""
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    screenshot_request: Optional[str] = Field(default=None, alias="screenshotRequest")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: object) -> str:
        return str(value or "").strip().lower()

    @field_validator("issues", "recommendations", mode="before")
    @classmethod
    def normalize_list(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        return [str(x).strip() for x in value if x is not None and str(x).strip()]


class ReportCategory(BaseModel):
    title: str
    items: list[ReportItem] = Field(default_factory=list)


class AuditReport(BaseModel):
    """The reconciled report: ordered categories of assessed items."""

    categories: list[ReportCategory]


class FailedAttempt(BaseModel):
    backend: str
    reason: str


class AuditResponse(BaseModel):
    """Response for POST /api/audit."""

    model_config = ConfigDict(populate_by_name=True)

    report: AuditReport
    model: str
    failed_attempts: list[FailedAttempt] = Field(default_factory=list, alias="failedAttempts")
    screenshot: Optional[str] = None
    element_screenshots: Optional[dict[str, str]] = Field(default=None, alias="elementScreenshots")
    fetched_at: str = Field(alias="fetchedAt")
    render_mode: str = Field(alias="renderMode")
