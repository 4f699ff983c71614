"""
pdf_report.py – Cyber Resilience Scorecard PDF renderer
=======================================================
Draws the structured report with reportlab's canvas API:

  Page 1   header band · generated-on / report-for lines
           overall score badge + interpretation
           category breakdown table with per-row progress bars
  Page 2+  recommendations (critical → enhancement, grouped by category),
           only when the submission carries any recommendations
  Every    centred "Page N" footer

Layout positions are millimetres from the top of the page (see layout.py);
``_x`` / ``_y`` convert them to reportlab's bottom-up point frame.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from reportlab.lib import colors as rl_colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from scorecard_report.artifacts import RenderedReport, unique_report_path
from scorecard_report.errors import RenderError
from scorecard_report.layout import (
    LEFT_MARGIN_MM,
    LINE_H,
    PAGE_HEIGHT_MM,
    PAGE_WIDTH_MM,
    TEXT_WIDTH,
    LayoutCursor,
    Placement,
    group_recommendations,
    plan_recommendations,
)
from scorecard_report.models import AssessmentSubmission, CategoryScore
from scorecard_report.scoring import RGB, score_color, score_interpretation

logger = logging.getLogger(__name__)

PAGE_W, PAGE_H = A4
_PT_TO_MM = 0.3528

# ─── Palette ──────────────────────────────────────────────────────────────────
HEADER_BLUE = RGB(59, 130, 246)
WHITE       = RGB(255, 255, 255)
BLACK       = RGB(0, 0, 0)
FOOTER_GREY = RGB(128, 128, 128)
TABLE_HEAD  = RGB(240, 240, 240)
ROW_TONES   = (RGB(250, 250, 250), RGB(255, 255, 255))
BAR_TRACK   = RGB(230, 230, 230)

# ─── Category table geometry (mm) ─────────────────────────────────────────────
COLUMNS: list[tuple[str, float, str]] = [
    ("Category",   80.0, "L"),
    ("Score",      30.0, "C"),
    ("Maximum",    30.0, "C"),
    ("Percentage", 50.0, "C"),
]
ROW_H       = 8.0
BAR_INSET   = 3.0
BAR_W       = 30.0
BAR_H       = 3.0

# ─── Score badge geometry (mm) ────────────────────────────────────────────────
BADGE_W, BADGE_H, BADGE_R = 100.0, 40.0, 3.0

_PLACEMENT_STYLE: dict[str, tuple[str, float, float]] = {
    # kind: (font, size, cell height)
    "section":  ("Helvetica-Bold", 16, 10.0),
    "bucket":   ("Helvetica-Bold", 14, 8.0),
    "category": ("Helvetica-Bold", 11, 6.0),
    "line":     ("Helvetica",      10, LINE_H),
}

REPORT_TITLE    = "Cyber Resilience Scorecard"
REPORT_SUBTITLE = "Assessment Results Report"

WRAP_FONT, WRAP_SIZE = "Helvetica", 10


def _x(v: float) -> float:
    return v * mm


def _y(v: float) -> float:
    return PAGE_H - v * mm


def _rl_colour(rgb: RGB):
    """Convert an 8-bit RGB triple to a reportlab Color."""
    return rl_colors.Color(rgb.r / 255, rgb.g / 255, rgb.b / 255)


def wrap_recommendation(text: str) -> list[str]:
    """Split *text* into lines that fit the recommendation text column.

    Words wider than the column (long URLs, hashes) are cut by character
    so nothing runs past the page edge.
    """
    limit = TEXT_WIDTH * mm
    lines: list[str] = []
    for line in simpleSplit(text, WRAP_FONT, WRAP_SIZE, limit):
        while stringWidth(line, WRAP_FONT, WRAP_SIZE) > limit:
            cut = 1
            while cut < len(line) and stringWidth(line[:cut + 1], WRAP_FONT, WRAP_SIZE) <= limit:
                cut += 1
            lines.append(line[:cut])
            line = line[cut:]
        lines.append(line)
    return lines


def _winansi_unsafe(submission: AssessmentSubmission) -> list[str]:
    """Texts the core Helvetica fonts cannot encode (drawn as boxes)."""
    texts = [submission.email]
    texts += [cat.name for cat in submission.category_scores]
    for rec in submission.recommendations:
        texts += [rec.category, rec.text]
    unsafe = []
    for text in texts:
        try:
            text.encode("cp1252")
        except UnicodeEncodeError:
            unsafe.append(text)
    return unsafe


def format_report_date(moment: datetime) -> str:
    """e.g. 'March 7, 2026' (no zero padding, locale independent of %-d)."""
    return f"{moment:%B} {moment.day}, {moment.year}"


# ─── Painter ─────────────────────────────────────────────────────────────────

class _ReportPainter:
    """Owns the canvas and the layout cursor for one document."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.cursor = LayoutCursor(on_new_page=self._turn_page)

    @property
    def page(self) -> int:
        return self.cursor.page

    # ── primitives ───────────────────────────────────────────────────────────

    def cell(self, text: str, x: float, y: float, w: float, h: float,
             font: str = "Helvetica", size: float = 10, colour: RGB = BLACK,
             align: str = "L") -> None:
        """Draw *text* vertically centred in the box (x, y, w, h)."""
        baseline = y + h / 2 + size * _PT_TO_MM * 0.35
        self.c.setFont(font, size)
        self.c.setFillColor(_rl_colour(colour))
        if align == "C":
            self.c.drawCentredString(_x(x + w / 2), _y(baseline), text)
        elif align == "R":
            self.c.drawRightString(_x(x + w - 1), _y(baseline), text)
        else:
            self.c.drawString(_x(x + 1), _y(baseline), text)

    def box(self, x: float, y: float, w: float, h: float, fill: RGB,
            stroke: bool = False) -> None:
        self.c.setFillColor(_rl_colour(fill))
        self.c.setStrokeColor(rl_colors.black)
        self.c.setLineWidth(0.2 * mm)
        self.c.rect(_x(x), _y(y + h), w * mm, h * mm, stroke=int(stroke), fill=1)

    def footer(self, page: int) -> None:
        self.cell(f"Page {page}", LEFT_MARGIN_MM, PAGE_HEIGHT_MM - 15, PAGE_WIDTH_MM - 20, 10,
                  font="Helvetica-Oblique", size=8, colour=FOOTER_GREY, align="C")

    def _turn_page(self, new_page: int) -> None:
        # cursor has already moved on; close the previous page
        self.footer(new_page - 1)
        self.c.showPage()

    def finish(self) -> int:
        self.footer(self.page)
        self.c.showPage()
        return self.page

    # ── sections ─────────────────────────────────────────────────────────────

    def header(self, email: str, generated: datetime) -> None:
        self.box(0, 0, PAGE_WIDTH_MM, 40, HEADER_BLUE)
        self.cell(REPORT_TITLE, 10, 10, 190, 10,
                  font="Helvetica-Bold", size=24, colour=WHITE, align="C")
        self.cell(REPORT_SUBTITLE, 10, 22, 190, 8, size=12, colour=WHITE, align="C")

        self.cursor.move_to(50)
        self.cell(f"Generated on: {format_report_date(generated)}", LEFT_MARGIN_MM, self.cursor.y, 190, 6)
        self.cursor.advance(6)
        self.cell(f"Report for: {email}", LEFT_MARGIN_MM, self.cursor.y, 190, 6)
        self.cursor.advance(12)

    def score_section(self, score: int) -> None:
        cur = self.cursor
        self.cell("Overall Resilience Score", LEFT_MARGIN_MM, cur.y, 190, 10,
                  font="Helvetica-Bold", size=16)
        cur.advance(12)

        cur.ensure_room(BADGE_H + 8)
        box_x = (PAGE_WIDTH_MM - BADGE_W) / 2
        box_y = cur.y
        self.c.setFillColor(_rl_colour(score_color(score)))
        self.c.roundRect(_x(box_x), _y(box_y + BADGE_H), BADGE_W * mm, BADGE_H * mm,
                         BADGE_R * mm, stroke=0, fill=1)
        self.cell(f"{score}%", box_x, box_y + 8, BADGE_W, 20,
                  font="Helvetica-Bold", size=36, colour=WHITE, align="C")

        cur.move_to(box_y + BADGE_H)
        self.cell(score_interpretation(score), LEFT_MARGIN_MM, cur.y, 190, 8, size=12)
        cur.advance(8)

    def _table_header(self) -> None:
        x = LEFT_MARGIN_MM
        for title, width, align in COLUMNS:
            self.box(x, self.cursor.y, width, ROW_H, TABLE_HEAD, stroke=True)
            self.cell(title, x, self.cursor.y, width, ROW_H, font="Helvetica-Bold", align=align)
            x += width
        self.cursor.advance(ROW_H)

    def _table_row(self, idx: int, cat: CategoryScore) -> None:
        y = self.cursor.y
        tone = ROW_TONES[idx % 2]
        values = [cat.name, f"{cat.score:.1f}", f"{cat.max:.1f}"]
        x = LEFT_MARGIN_MM
        for (_, width, align), value in zip(COLUMNS[:3], values):
            self.box(x, y, width, ROW_H, tone, stroke=True)
            self.cell(value, x, y, width, ROW_H, align=align)
            x += width

        # Percentage cell: progress bar on the left, value on the right
        pct_w = COLUMNS[3][1]
        self.box(x, y, pct_w, ROW_H, tone, stroke=True)
        bar_x = x + BAR_INSET
        bar_y = y + (ROW_H - BAR_H) / 2
        self.box(bar_x, bar_y, BAR_W, BAR_H, BAR_TRACK)
        filled = BAR_W * max(0.0, min(cat.percentage, 100.0)) / 100
        if filled > 0:
            self.box(bar_x, bar_y, filled, BAR_H, score_color(cat.percentage))
        self.cell(f"{cat.percentage:.1f}%", x, y, pct_w, ROW_H, align="R")
        self.cursor.advance(ROW_H)

    def category_table(self, categories: tuple[CategoryScore, ...]) -> None:
        cur = self.cursor
        cur.ensure_room(10 + ROW_H * 2)
        self.cell("Category Breakdown", LEFT_MARGIN_MM, cur.y, 190, 10,
                  font="Helvetica-Bold", size=16)
        cur.advance(10)

        self._table_header()
        for idx, cat in enumerate(categories):
            if cur.ensure_room(ROW_H):
                self._table_header()
            self._table_row(idx, cat)

    def recommendations(self, placements: list[Placement]) -> None:
        for p in placements:
            while self.page < p.page:
                self.cursor.new_page()
            if p.kind == "bullet":
                self.c.setFillColor(_rl_colour(p.colour or BLACK))
                self.c.circle(_x(p.x), _y(p.y + 2.5), 1.5 * mm, stroke=0, fill=1)
                continue
            font, size, height = _PLACEMENT_STYLE[p.kind]
            self.cell(p.text, p.x, p.y, 190, height, font=font, size=size,
                      colour=p.colour or BLACK)


# ─── Renderer ────────────────────────────────────────────────────────────────

class PdfReportRenderer:
    """
    Render an AssessmentSubmission into a uniquely named PDF under
    *output_dir*. ``invariant=True`` asks reportlab for byte-stable output
    (fixed document ID and timestamps).
    """

    def __init__(
        self,
        output_dir: "str | Path" = "pdf_output",
        clock: Optional[Callable[[], datetime]] = None,
        invariant: bool = False,
    ):
        self.output_dir = Path(output_dir)
        self._clock = clock or datetime.now
        self._invariant = invariant

    def render(self, submission: AssessmentSubmission) -> RenderedReport:
        path = unique_report_path(self.output_dir)
        try:
            pages = self._draw(submission, path)
        except Exception as exc:
            path.unlink(missing_ok=True)
            logger.error("PDF generation failed for %s: %s", submission.email, exc)
            raise RenderError(f"Failed to generate PDF: {exc}") from exc

        logger.info("PDF generated successfully: %s (%d page(s))", path, pages)
        return RenderedReport(path=path, page_count=pages)

    def _draw(self, submission: AssessmentSubmission, path: Path) -> int:
        c = canvas.Canvas(str(path), pagesize=A4, invariant=int(self._invariant))
        c.setTitle(REPORT_TITLE)
        c.setSubject(f"{REPORT_SUBTITLE} for {submission.email}")

        unsafe = _winansi_unsafe(submission)
        if unsafe:
            logger.warning(
                "%d text field(s) for %s contain characters outside WinAnsi; "
                "they will render as boxes (first: %r)",
                len(unsafe), submission.email, unsafe[0],
            )

        painter = _ReportPainter(c)
        painter.header(submission.email, self._clock())
        painter.score_section(submission.score)
        painter.cursor.advance(10)
        painter.category_table(submission.category_scores)

        if submission.recommendations:
            start = LayoutCursor(page=painter.page + 1)
            placements = plan_recommendations(
                group_recommendations(submission.recommendations),
                wrap_recommendation,
                start,
            )
            painter.recommendations(placements)

        pages = painter.finish()
        c.save()
        return pages
