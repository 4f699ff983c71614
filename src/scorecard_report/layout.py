"""
layout.py — Layout cursor and recommendation page planning
==========================================================
Everything in this module is pure: it decides *where* things go, never
draws them. pdf_report.py walks the resulting placements and emits the
reportlab drawing calls.

Coordinates are millimetres measured from the top edge of an A4 page,
the same frame the report layout is specified in.

  LayoutCursor            current page + vertical write position
  group_recommendations   status bucket → category → items (first-seen order)
  plan_recommendations    list[Placement] with page-break decisions applied
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from scorecard_report.models import Recommendation, RecommendationStatus
from scorecard_report.scoring import RGB

# ─── Page geometry (mm) ───────────────────────────────────────────────────────
PAGE_WIDTH_MM  = 210.0
PAGE_HEIGHT_MM = 297.0
TOP_MARGIN_MM  = 10.0
LEFT_MARGIN_MM = 10.0
BOTTOM_LIMIT_MM = 277.0            # auto page break; footer sits below
RECOMMENDATION_BREAK_MM = 250.0    # start a new page before an item past this

# ─── Recommendation list metrics (mm) ─────────────────────────────────────────
SECTION_HEADING_H = 10.0
BUCKET_HEADING_H  = 8.0
CATEGORY_HEADING_H = 6.0
LINE_H            = 5.0
ITEM_GAP          = 2.0
CATEGORY_GAP      = 4.0
BUCKET_GAP        = 8.0
BULLET_X          = 17.0
TEXT_X            = 20.0
TEXT_WIDTH        = 170.0

CRITICAL_RED   = RGB(220, 38, 38)
ENHANCE_AMBER  = RGB(245, 158, 11)

SECTION_TITLE = "Recommendations for Improvement"


# ─── Cursor ───────────────────────────────────────────────────────────────────

@dataclass
class LayoutCursor:
    """Current vertical write position; page breaks are driven by ``y`` alone."""
    y:      float = TOP_MARGIN_MM
    page:   int   = 1
    top:    float = TOP_MARGIN_MM
    bottom: float = BOTTOM_LIMIT_MM
    on_new_page: Optional[Callable[[int], None]] = field(default=None, repr=False)

    def advance(self, height: float) -> None:
        self.y += height

    def move_to(self, y: float) -> None:
        self.y = y

    def new_page(self) -> None:
        self.page += 1
        self.y = self.top
        if self.on_new_page is not None:
            self.on_new_page(self.page)

    def break_if_past(self, threshold: float) -> bool:
        """Start a new page when the cursor is already below *threshold*."""
        if self.y > threshold:
            self.new_page()
            return True
        return False

    def ensure_room(self, height: float) -> bool:
        """Start a new page when *height* would not fit above the bottom limit."""
        if self.y + height > self.bottom:
            self.new_page()
            return True
        return False


# ─── Grouping ────────────────────────────────────────────────────────────────

@dataclass
class RecommendationBucket:
    status:     RecommendationStatus
    title:      str
    colour:     RGB
    categories: dict[str, list[Recommendation]] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return sum(len(items) for items in self.categories.values())


_BUCKET_ORDER: list[tuple[RecommendationStatus, str, RGB]] = [
    (RecommendationStatus.MISSING, "Critical Improvements Needed", CRITICAL_RED),
    (RecommendationStatus.PARTIAL, "Areas for Enhancement",        ENHANCE_AMBER),
]


def group_recommendations(recs: Iterable[Recommendation]) -> list[RecommendationBucket]:
    """
    Partition *recs* into the critical (missing) and enhancement (partial)
    buckets, each grouped by category in first-seen order. Implemented
    items are dropped and empty buckets are omitted.
    """
    buckets = {
        status: RecommendationBucket(status=status, title=title, colour=colour)
        for status, title, colour in _BUCKET_ORDER
    }
    for rec in recs:
        bucket = buckets.get(rec.status)
        if bucket is None:
            continue
        bucket.categories.setdefault(rec.category, []).append(rec)
    return [buckets[status] for status, _, _ in _BUCKET_ORDER if buckets[status].count]


# ─── Planning ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Placement:
    """One positioned unit of the recommendations section."""
    kind:   str            # "section" | "bucket" | "category" | "bullet" | "line"
    page:   int
    y:      float
    x:      float = LEFT_MARGIN_MM
    text:   str = ""
    colour: Optional[RGB] = None


def plan_recommendations(
    buckets: list[RecommendationBucket],
    wrap: Callable[[str], list[str]],
    cursor: Optional[LayoutCursor] = None,
) -> list[Placement]:
    """
    Lay out the recommendations section starting at *cursor* (a fresh page
    by default). *wrap* splits a recommendation's text into lines that fit
    TEXT_WIDTH; it is injected so planning stays independent of fonts.

    Before each recommendation, a cursor below RECOMMENDATION_BREAK_MM
    forces a new page. Wrapped lines that would cross the bottom limit
    continue on the next page, so no text is dropped.
    """
    cur = cursor if cursor is not None else LayoutCursor()
    out: list[Placement] = []

    def place(kind: str, height: float, text: str = "", x: float = LEFT_MARGIN_MM,
              colour: Optional[RGB] = None) -> None:
        cur.ensure_room(height)
        out.append(Placement(kind=kind, page=cur.page, y=cur.y, x=x, text=text, colour=colour))
        cur.advance(height)

    place("section", SECTION_HEADING_H, SECTION_TITLE)

    for b_idx, bucket in enumerate(buckets):
        place("bucket", BUCKET_HEADING_H, bucket.title, colour=bucket.colour)

        for category, items in bucket.categories.items():
            place("category", CATEGORY_HEADING_H, category)

            for rec in items:
                cur.break_if_past(RECOMMENDATION_BREAK_MM)
                lines = wrap(rec.text) or [""]

                # Bullet stays on the same page as the first line of text
                cur.ensure_room(LINE_H)
                out.append(Placement(kind="bullet", page=cur.page, y=cur.y,
                                     x=BULLET_X, colour=bucket.colour))
                for line in lines:
                    place("line", LINE_H, line, x=TEXT_X)
                cur.advance(ITEM_GAP)

            cur.advance(CATEGORY_GAP)

        if b_idx < len(buckets) - 1:
            cur.advance(BUCKET_GAP)

    return out
