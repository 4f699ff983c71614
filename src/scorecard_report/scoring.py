"""
scoring.py — Score → colour / interpretation policy
===================================================
Four-tier step function shared by the score badge, the category progress
bars and the email body:

  score ≥ 80   EXCELLENT          green
  60 – 79      GOOD               amber
  40 – 59      FAIR               orange
  score < 40   NEEDS_IMPROVEMENT  red
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class ScoreTier(str, Enum):
    EXCELLENT         = "excellent"          # ≥ 80
    GOOD              = "good"               # 60–79
    FAIR              = "fair"               # 40–59
    NEEDS_IMPROVEMENT = "needs_improvement"  # < 40


_TIER_COLOUR: dict[ScoreTier, RGB] = {
    ScoreTier.EXCELLENT:         RGB(34, 197, 94),    # green
    ScoreTier.GOOD:              RGB(251, 191, 36),   # amber
    ScoreTier.FAIR:              RGB(251, 146, 60),   # orange
    ScoreTier.NEEDS_IMPROVEMENT: RGB(239, 68, 68),    # red
}

_TIER_TEXT: dict[ScoreTier, str] = {
    ScoreTier.EXCELLENT:
        "Excellent - Your organization demonstrates strong cyber resilience",
    ScoreTier.GOOD:
        "Good - Your organization has solid foundations with room for improvement",
    ScoreTier.FAIR:
        "Fair - Several areas require attention to improve resilience",
    ScoreTier.NEEDS_IMPROVEMENT:
        "Needs Improvement - Significant gaps identified in cyber resilience",
}


def score_tier(score: float) -> ScoreTier:
    """Map a 0–100 score to its tier. Fractions are truncated (79.9 → GOOD)."""
    s = int(score)
    if s >= 80:
        return ScoreTier.EXCELLENT
    if s >= 60:
        return ScoreTier.GOOD
    if s >= 40:
        return ScoreTier.FAIR
    return ScoreTier.NEEDS_IMPROVEMENT


def score_color(score: float) -> RGB:
    return _TIER_COLOUR[score_tier(score)]


def score_interpretation(score: float) -> str:
    return _TIER_TEXT[score_tier(score)]
