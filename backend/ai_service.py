"""
API keys must be defined in a .env file in the backend root:

GEMINI_API_KEY=your_real_key_here
ANTHROPIC_API_KEY=your_real_key_here

The app loads environment variables automatically using python-dotenv.
A missing key only fails the attempts on that backend; the ladder moves on.
"""

import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

from anthropic import Anthropic
from google import genai
from google.genai import types

from errors import GenerationLadderError, ReportParseError
from json_repair import parse_model_json
from logger import get_logger
from models import AttemptLadder, GenerationAttempt
from prompt_builder import SYSTEM_MESSAGE
from schemas import AuditReport

logger = get_logger(__name__)

DEFAULT_MODEL_CANDIDATES = "gemini-2.5-pro,gemini-2.5-flash,gemini-2.0-flash,claude-3-5-sonnet-latest"
MODEL_CANDIDATES = [
    m.strip() for m in os.getenv("AUDIT_MODEL_CANDIDATES", DEFAULT_MODEL_CANDIDATES).split(",") if m.strip()
]
TEMPERATURE = float(os.getenv("AUDIT_TEMPERATURE", "0.2"))
MAX_OUTPUT_TOKENS = int(os.getenv("AUDIT_MAX_OUTPUT_TOKENS", "32000"))
CLAUDE_MAX_TOKENS = int(os.getenv("CLAUDE_MAX_TOKENS", "8192"))
TOP_P = float(os.getenv("AUDIT_TOP_P", "0.95"))
TOP_K = int(os.getenv("AUDIT_TOP_K", "40"))

Generator = Callable[[str, str], str]


class BackendError(Exception):
    """A single generation attempt failed; the ladder records it and continues."""


def build_model_candidates(requested: Optional[str] = None, defaults: Optional[Iterable[str]] = None) -> list[str]:
    """Requested model first, then the defaults, without duplicates."""
    ordered = [requested or ""] + list(MODEL_CANDIDATES if defaults is None else defaults)
    candidates: list[str] = []
    for model in ordered:
        model = model.strip()
        if model and model not in candidates:
            candidates.append(model)
    return candidates


def _extract_response_text(response: object) -> str:
    content = ""
    for block in getattr(response, "content", []) or []:
        text = getattr(block, "text", None)
        if text:
            content += text
    return content.strip()


def _call_claude(model: str, prompt: str) -> str:
    api_key = os.getenv("ANTHROPIC_API_KEY", "").strip()
    if not api_key:
        raise BackendError("ANTHROPIC_API_KEY not configured")

    client = Anthropic(api_key=api_key)
    response = client.messages.create(
        model=model,
        max_tokens=CLAUDE_MAX_TOKENS,
        system=SYSTEM_MESSAGE,
        messages=[{"role": "user", "content": prompt}],
        temperature=TEMPERATURE,
    )
    if getattr(response, "stop_reason", None) == "max_tokens":
        logger.warning("Claude output hit max_tokens for model=%s", model)
    return _extract_response_text(response)


def _call_gemini(model: str, prompt: str) -> str:
    api_key = os.getenv("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise BackendError("GEMINI_API_KEY not configured")

    client = genai.Client(api_key=api_key)
    response = client.models.generate_content(
        model=model,
        contents=prompt,
        config=types.GenerateContentConfig(
            system_instruction=SYSTEM_MESSAGE,
            temperature=TEMPERATURE,
            top_p=TOP_P,
            top_k=TOP_K,
            max_output_tokens=MAX_OUTPUT_TOKENS,
            response_mime_type="application/json",
        ),
    )
    return (getattr(response, "text", None) or "").strip()


def generate_with_model(model: str, prompt: str) -> str:
    """Dispatch on the model id prefix."""
    if model.startswith("gemini"):
        return _call_gemini(model, prompt)
    if model.startswith("claude"):
        return _call_claude(model, prompt)
    raise BackendError(f"unsupported model '{model}'")


def run_generation_ladder(prompt: str, candidates: list[str], generate: Generator = generate_with_model) -> AttemptLadder:
    """Try each candidate in order, once; stop at the first non-empty output."""
    attempts: list[GenerationAttempt] = []
    for model in candidates:
        logger.info("Trying model: %s", model)
        try:
            output = generate(model, prompt)
        except Exception as exc:
            reason = str(exc) or exc.__class__.__name__
            logger.warning("Model %s failed: %s", model, reason)
            attempts.append(GenerationAttempt(backend=model, success=False, failure_reason=reason))
            continue

        if not output or not output.strip():
            logger.warning("Model %s returned an empty response", model)
            attempts.append(GenerationAttempt(backend=model, success=False, failure_reason="empty response"))
            continue

        logger.info("Successfully used model: %s", model)
        attempts.append(GenerationAttempt(backend=model, success=True, output=output))
        break
    return AttemptLadder(attempts=tuple(attempts))


def reconcile_report(raw_text: str) -> AuditReport:
    """Repair and parse ``raw_text``, then validate it as a report."""
    parsed = parse_model_json(raw_text)
    try:
        return AuditReport.model_validate(parsed)
    except ValidationError as exc:
        raise ReportParseError(f"Model response does not match the report schema: {exc}", raw_text=raw_text) from exc


def resolve_report(
    prompt: str,
    requested_model: Optional[str] = None,
    generate: Generator = generate_with_model,
    defaults: Optional[Iterable[str]] = None,
) -> tuple[AuditReport, AttemptLadder]:
    """
    Run the ladder for ``prompt`` and reconcile the winning output.

    Raises:
        GenerationLadderError: every candidate failed.
        ReportParseError: the winning output could not be repaired into a report.
    """
    candidates = build_model_candidates(requested_model, defaults)
    ladder = run_generation_ladder(prompt, candidates, generate)
    if not ladder.succeeded:
        raise GenerationLadderError(ladder)

    winner = ladder.winner
    logger.debug("Raw output from %s: %s", winner.backend, winner.output)
    return reconcile_report(winner.output), ladder
