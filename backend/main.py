"""Website audit API – FastAPI app and endpoints."""

import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from audit_service import run_audit
from checklist import catalog_as_dict
from errors import FetchError, GenerationLadderError, ReportParseError
from logger import get_logger
from rate_limiter import SlidingWindowRateLimiter
from schemas import AuditRequest, AuditResponse
from snapshot import BROWSER_ENABLED

logger = get_logger(__name__)

app = FastAPI(
    title="Website Audit API",
    description="Rendered-page UX and accessibility audit",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.rate_limiter = SlidingWindowRateLimiter()


def _client_id(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@app.post("/api/audit", response_model=AuditResponse)
def audit(body: AuditRequest, request: Request) -> AuditResponse:
    """
    Pipeline: render page (+ PSI) -> compile prompt -> model ladder -> validated report.
    """
    client_id = _client_id(request)
    if not request.app.state.rate_limiter.allow(client_id):
        logger.warning("Rate limit exceeded for %s", client_id)
        raise HTTPException(status_code=429, detail="Rate limit exceeded. Please try again later.")

    logger.info("Audit request received: url=%s model=%s", body.url, body.model or "default")
    try:
        return run_audit(body)
    except FetchError as exc:
        logger.error("Could not fetch %s: %s", body.url, exc.cause)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except GenerationLadderError as exc:
        logger.error("Generation failed for %s: %s", body.url, exc)
        raise HTTPException(
            status_code=502,
            detail={"message": str(exc), "failedAttempts": exc.ladder.to_dict()["failures"]},
        ) from exc
    except ReportParseError as exc:
        logger.error("Could not parse model response for %s: %s", body.url, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.get("/api/checklist")
def checklist() -> list[dict]:
    """Known audit categories and items, all selected."""
    return catalog_as_dict()


@app.get("/api/health")
def health() -> dict:
    """Health check for deployment."""
    return {
        "status": "ok",
        "models": {
            "gemini": bool(os.getenv("GEMINI_API_KEY")),
            "claude": bool(os.getenv("ANTHROPIC_API_KEY")),
        },
        "features": {
            "pageSpeedInsights": bool(os.getenv("PSI_API_KEY")),
            "browser": BROWSER_ENABLED,
        },
    }
