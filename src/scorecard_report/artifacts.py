"""
artifacts.py — Request-scoped rendered report files
===================================================
A RenderedReport is created by a renderer, read once by the mailer and
then deleted. ``report_scope`` ties that lifecycle to a ``with`` block so
the file is removed on every exit path, including delivery failure.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol

from scorecard_report.errors import RenderError
from scorecard_report.models import AssessmentSubmission

logger = logging.getLogger(__name__)

REPORT_PREFIX = "cyber_resilience_report"
REPORT_SUFFIX = ".pdf"


@dataclass(frozen=True)
class RenderedReport:
    """A generated PDF owned by exactly one request."""
    path:       Path
    page_count: int = 0

    @property
    def filename(self) -> str:
        return self.path.name

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def discard(self) -> None:
        """Delete the file; a file that is already gone is not an error."""
        try:
            self.path.unlink()
            logger.debug("Removed report artifact %s", self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove report artifact %s: %s", self.path, exc)


class ReportRenderer(Protocol):
    def render(self, submission: AssessmentSubmission) -> RenderedReport: ...


def unique_report_path(
    output_dir: "str | Path",
    prefix: str = REPORT_PREFIX,
    suffix: str = REPORT_SUFFIX,
) -> Path:
    """Return a collision-resistant path under *output_dir*, creating the dir."""
    directory = Path(output_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RenderError(f"Failed to create output directory {directory}: {exc}") from exc
    return directory / f"{prefix}_{uuid.uuid4().hex}{suffix}"


@contextmanager
def report_scope(
    renderer: ReportRenderer,
    submission: AssessmentSubmission,
) -> Iterator[RenderedReport]:
    """Render *submission* and guarantee the artifact is discarded on exit."""
    report = renderer.render(submission)
    try:
        yield report
    finally:
        report.discard()
