"""Audit pipeline: evidence -> prompt -> model ladder -> validated report."""

from concurrent.futures import ThreadPoolExecutor

from ai_service import generate_with_model, resolve_report
from logger import get_logger
from models import Snapshot
from pagespeed import fetch_metrics
from prompt_builder import compile_prompt
from schemas import AuditRequest, AuditResponse, FailedAttempt
from snapshot import capture_snapshot

logger = get_logger(__name__)


def gather_page_evidence(url: str, capture=capture_snapshot, metrics=fetch_metrics) -> Snapshot:
    """
    Capture the page and fetch external metrics concurrently.

    The two results are read independently: a metrics failure only leaves
    ``external_metrics`` empty, while a FetchError from the capture propagates.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        snapshot_future = pool.submit(capture, url)
        metrics_future = pool.submit(metrics, url)

        external_metrics = None
        try:
            external_metrics = metrics_future.result()
        except Exception as exc:
            logger.warning("External metrics unavailable for %s: %s", url, exc)

        snapshot = snapshot_future.result()

    return snapshot.with_external_metrics(external_metrics)


def run_audit(
    request: AuditRequest,
    capture=capture_snapshot,
    metrics=fetch_metrics,
    generate=generate_with_model,
) -> AuditResponse:
    """Run one audit end to end."""
    logger.info("Starting audit for %s", request.url)
    snapshot = gather_page_evidence(request.url, capture=capture, metrics=metrics)
    logger.info(
        "Evidence gathered for %s: render_mode=%s style=%s reflow=%s zoom=%s mobile=%s psi=%s",
        request.url,
        snapshot.render_mode,
        snapshot.style_analysis is not None,
        snapshot.reflow_test is not None,
        snapshot.zoom_test is not None,
        snapshot.mobile_data is not None,
        snapshot.external_metrics is not None,
    )

    prompt = compile_prompt(request.url, snapshot, request.audit_options)
    report, ladder = resolve_report(prompt, requested_model=request.model, generate=generate)
    logger.info("Audit complete for %s using %s", request.url, ladder.winner.backend)

    return AuditResponse(
        report=report,
        model=ladder.winner.backend,
        failed_attempts=[FailedAttempt(backend=a.backend, reason=a.failure_reason or "") for a in ladder.failures],
        screenshot=snapshot.screenshot,
        element_screenshots=snapshot.element_screenshots,
        fetched_at=snapshot.fetched_at,
        render_mode=snapshot.render_mode,
    )
