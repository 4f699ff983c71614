"""
Shared pytest fixtures for the scorecard report test suite.
No real SMTP relay or wkhtmltopdf binary is needed: transports are
replaced with in-memory fakes from tests/factories.py.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

import smtplib

import pytest

from factories import FakeSMTP, make_settings, make_submission

from scorecard_report.pdf_report import PdfReportRenderer


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "pdf_output"


@pytest.fixture
def settings(output_dir):
    return make_settings(output_dir)


@pytest.fixture
def renderer(output_dir):
    return PdfReportRenderer(output_dir)


@pytest.fixture
def submission():
    return make_submission()


@pytest.fixture
def fake_smtp(monkeypatch):
    """Replace smtplib.SMTP / SMTP_SSL with a fresh FakeSMTP subclass."""
    class _SMTP(FakeSMTP):
        instances = []
        extensions = {"starttls"}
        fail_with = None

    monkeypatch.setattr(smtplib, "SMTP", _SMTP)
    monkeypatch.setattr(smtplib, "SMTP_SSL", _SMTP)
    return _SMTP


@pytest.fixture
def smtp_env(monkeypatch):
    """A minimal valid environment; tests delete or override keys as needed."""
    for key in ("SMTP_PORT", "SMTP_USER", "SMTP_PASS", "SMTP_TIMEOUT", "PORT",
                "HOST", "PDF_OUTPUT_DIR", "WKHTMLTOPDF_BIN", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SMTP_HOST", "smtp.test.local")
    monkeypatch.setenv("FROM_EMAIL", "scorecard@test.local")
    return monkeypatch
