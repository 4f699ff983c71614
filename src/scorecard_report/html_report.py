"""
html_report.py — HTML → PDF via an external wkhtmltopdf process
===============================================================
Used for clients that post pre-rendered report markup in ``htmlContent``
instead of structured scores. The HTML is piped to ``wkhtmltopdf - <out>``
on stdin; the PDF lands under the same output directory as the
structured renderer's artifacts.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from scorecard_report.artifacts import RenderedReport, unique_report_path
from scorecard_report.errors import RenderError
from scorecard_report.models import AssessmentSubmission

logger = logging.getLogger(__name__)


class HtmlReportRenderer:
    def __init__(
        self,
        output_dir: "str | Path" = "pdf_output",
        binary: str = "wkhtmltopdf",
        timeout: float = 120.0,
    ):
        self.output_dir = Path(output_dir)
        self.binary = binary
        self.timeout = timeout

    def render(self, submission: AssessmentSubmission) -> RenderedReport:
        if not submission.html_content:
            raise RenderError("No HTML content to render")

        path = unique_report_path(self.output_dir)
        cmd = [self.binary, "--quiet", "-", str(path)]
        try:
            result = subprocess.run(
                cmd,
                input=submission.html_content.encode("utf-8"),
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise RenderError(f"{self.binary} is not installed or not on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            path.unlink(missing_ok=True)
            raise RenderError(f"{self.binary} timed out after {self.timeout:.0f}s") from exc

        if result.returncode != 0:
            path.unlink(missing_ok=True)
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error("%s exited with code %d: %s", self.binary, result.returncode, stderr)
            raise RenderError(f"Failed to generate PDF ({self.binary} exit {result.returncode})")

        if not path.exists():
            raise RenderError(f"{self.binary} reported success but wrote no file")

        logger.info("PDF generated from HTML: %s", path)
        return RenderedReport(path=path)
