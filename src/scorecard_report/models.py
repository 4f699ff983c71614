"""
Data models for the Scorecard Report Service.

The frontend posts camelCase JSON; fields are exposed here in snake_case
through pydantic aliases. All models are frozen: a submission is decoded
once per request and never mutated afterwards.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from scorecard_report.errors import DecodeError

logger = logging.getLogger(__name__)


# ─── Enumerations ────────────────────────────────────────────────────────────

class RecommendationStatus(str, Enum):
    """Completion status of the control a recommendation refers to."""
    MISSING     = "missing"      # control absent → critical improvement
    PARTIAL     = "partial"      # control partly in place → enhancement
    IMPLEMENTED = "implemented"  # nothing to recommend; never rendered


# ─── Request models ──────────────────────────────────────────────────────────

class CategoryScore(BaseModel):
    """Score obtained in one scorecard category."""
    model_config = ConfigDict(frozen=True)

    name:       str
    score:      float
    max:        float
    percentage: float = Field(description="0–100, trusted as supplied")


class Recommendation(BaseModel):
    """One improvement recommendation attached to a scorecard question."""
    model_config = ConfigDict(frozen=True)

    category: str
    question: str = ""
    text:     str
    status:   RecommendationStatus


class AssessmentSubmission(BaseModel):
    """
    Body of POST /generate-pdf.

    ``htmlContent`` is accepted for clients that pre-render their own
    report markup; structured fields take precedence when both are sent.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email:           EmailStr
    score:           int = Field(default=0, ge=0, le=100)
    category_scores: tuple[CategoryScore, ...] = Field(default=(), alias="categoryScores")
    recommendations: tuple[Recommendation, ...] = ()
    html_content:    Optional[str] = Field(default=None, alias="htmlContent")

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value):
        # surrounding blanks only; CR/LF inside the address is rejected by EmailStr
        return value.strip(" \t") if isinstance(value, str) else value

    # ── Derived helpers ──────────────────────────────────────────────────────

    @property
    def has_structured_content(self) -> bool:
        return (
            "score" in self.model_fields_set
            or bool(self.category_scores)
            or bool(self.recommendations)
        )

    @property
    def is_html_only(self) -> bool:
        return bool(self.html_content and self.html_content.strip()) and not self.has_structured_content


# ─── Decoding ────────────────────────────────────────────────────────────────

def decode_submission(body: bytes) -> AssessmentSubmission:
    """Decode a raw request body into an AssessmentSubmission.

    Raises DecodeError for an empty body, malformed JSON, a JSON value that
    is not an object, or a payload that fails schema validation.
    """
    if not body or not body.strip():
        raise DecodeError("Request body is empty")

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Invalid request body: {exc}") from exc

    if not isinstance(payload, dict):
        raise DecodeError("Invalid request body: expected a JSON object")

    try:
        submission = AssessmentSubmission.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors()
        )
        raise DecodeError(f"Invalid request body: check field(s) {fields}") from exc

    logger.debug(
        "Decoded submission for %s: %d categories, %d recommendations",
        submission.email, len(submission.category_scores), len(submission.recommendations),
    )
    return submission
