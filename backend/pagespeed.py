"""
PageSpeed Insights client. Optional: a missing PSI_API_KEY or any failure
means "no external metrics", never an error for the audit.

PSI_API_KEY=your_key_here in backend/.env enables it.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import requests
from dotenv import load_dotenv

from logger import get_logger
from models import ExternalMetrics, StrategyMetrics, utc_now_iso

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

logger = get_logger(__name__)

PSI_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
PSI_TIMEOUT_SECONDS = float(os.getenv("PSI_TIMEOUT_SECONDS", "60"))
STRATEGIES = ("mobile", "desktop")
PERFORMANCE_METRIC_IDS = (
    "first-contentful-paint",
    "largest-contentful-paint",
    "total-blocking-time",
    "cumulative-layout-shift",
    "speed-index",
)


def _score(category: dict | None) -> int | None:
    if not category or category.get("score") is None:
        return None
    return round(category["score"] * 100)


def _accessibility_audit_ids(lighthouse: dict) -> list[str]:
    refs = ((lighthouse.get("categories") or {}).get("accessibility") or {}).get("auditRefs") or []
    ids = [ref["id"] for ref in refs if ref.get("id")]
    if ids:
        return ids
    return [key for key in (lighthouse.get("audits") or {}) if key.startswith("accessibility")]


def extract_strategy_metrics(payload: dict | None, strategy: str) -> StrategyMetrics | None:
    """Scores, accessibility audits and core timings from one PSI response."""
    if not payload or not payload.get("lighthouseResult"):
        return None

    lighthouse = payload["lighthouseResult"]
    audits = lighthouse.get("audits") or {}
    categories = lighthouse.get("categories") or {}
    config = lighthouse.get("configSettings") or {}

    accessibility_audits = {}
    for audit_id in _accessibility_audit_ids(lighthouse):
        audit = audits.get(audit_id)
        if not audit:
            continue
        accessibility_audits[audit_id] = {
            "title": audit.get("title"),
            "description": audit.get("description"),
            "score": audit.get("score"),
            "display_value": audit.get("displayValue"),
        }

    performance_metrics = {}
    for metric_id in PERFORMANCE_METRIC_IDS:
        audit = audits.get(metric_id)
        if not audit:
            continue
        performance_metrics[metric_id] = {
            "title": audit.get("title"),
            "display_value": audit.get("displayValue"),
            "numeric_value": audit.get("numericValue"),
            "score": audit.get("score"),
        }

    return {
        "strategy": strategy,
        "scores": {
            "performance": _score(categories.get("performance")),
            "accessibility": _score(categories.get("accessibility")),
            "best_practices": _score(categories.get("best-practices")),
            "seo": _score(categories.get("seo")),
        },
        "accessibility_audits": accessibility_audits,
        "performance_metrics": performance_metrics,
        "final_url": lighthouse.get("finalUrl"),
        "user_agent": lighthouse.get("userAgent"),
        "emulated_form_factor": config.get("formFactor") or config.get("emulatedFormFactor"),
    }


def _fetch_strategy(url: str, strategy: str, api_key: str) -> StrategyMetrics | None:
    try:
        response = requests.get(
            PSI_ENDPOINT,
            params=[
                ("url", url),
                ("key", api_key),
                ("strategy", strategy),
                ("category", "ACCESSIBILITY"),
                ("category", "PERFORMANCE"),
            ],
            timeout=PSI_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return extract_strategy_metrics(response.json(), strategy)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("PageSpeed Insights %s request failed: %s", strategy, exc)
        return None


def fetch_metrics(url: str) -> ExternalMetrics | None:
    """Both strategies, fetched concurrently. None when neither is usable."""
    api_key = os.getenv("PSI_API_KEY", "").strip()
    if not api_key:
        logger.info("PSI_API_KEY not set, skipping PageSpeed Insights")
        return None

    logger.info("Fetching PageSpeed Insights data for %s", url)
    with ThreadPoolExecutor(max_workers=len(STRATEGIES)) as pool:
        futures = {s: pool.submit(_fetch_strategy, url, s, api_key) for s in STRATEGIES}
        results = {s: future.result() for s, future in futures.items()}

    if not any(results.values()):
        logger.warning("PageSpeed Insights returned no data for %s", url)
        return None

    logger.info(
        "PageSpeed Insights accessibility: mobile=%s desktop=%s",
        (results["mobile"] or {}).get("scores", {}).get("accessibility", "N/A"),
        (results["desktop"] or {}).get("scores", {}).get("accessibility", "N/A"),
    )
    return {"mobile": results["mobile"], "desktop": results["desktop"], "fetched_at": utc_now_iso()}
