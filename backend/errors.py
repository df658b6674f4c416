"""Errors that cross the audit core boundary.

Everything else (navigation timeouts, failed sub-stages, missing external
metrics) is logged and degrades the snapshot instead of raising.
"""

from models import AttemptLadder


class AuditError(Exception):
    """Base class for fatal audit failures."""


class FetchError(AuditError):
    """The page could not be reached by the browser nor by a plain HTTP GET."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Could not fetch {url}: {cause}")
        self.url = url
        self.cause = cause


class GenerationLadderError(AuditError):
    """Every generation backend in the ladder failed."""

    def __init__(self, ladder: AttemptLadder):
        reasons = ladder.failure_summary() or "no candidate models configured"
        super().__init__(f"All generation backends failed. {reasons}")
        self.ladder = ladder


class ReportParseError(AuditError):
    """Model output could not be repaired into a valid report."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
