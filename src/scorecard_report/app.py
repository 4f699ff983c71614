"""
Flask application for the Scorecard Report Service.

  POST    /generate-pdf   decode → render → email → cleanup → 200 JSON
  OPTIONS /generate-pdf   CORS preflight (flask-cors), empty body
  GET     /health         liveness probe
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from flask import Blueprint, Flask, current_app, g, jsonify, request
from flask_cors import CORS

from scorecard_report import __version__
from scorecard_report.artifacts import ReportRenderer, report_scope
from scorecard_report.config import Settings
from scorecard_report.errors import DecodeError, DeliveryError, RenderError
from scorecard_report.html_report import HtmlReportRenderer
from scorecard_report.mailer import ReportMailer
from scorecard_report.models import decode_submission
from scorecard_report.pdf_report import PdfReportRenderer

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "PDF generated and emailed successfully"
EXTENSION_KEY = "scorecard_report"


@dataclass(frozen=True)
class ReportServices:
    """Collaborators shared (read-only) by every request."""
    renderer:      ReportRenderer
    html_renderer: ReportRenderer
    mailer:        ReportMailer


report_bp = Blueprint("report", __name__)


# ============== ROUTES ==============

@report_bp.route("/generate-pdf", methods=["POST"])
def generate_pdf():
    """Render the posted scorecard to PDF and email it to the submitter."""
    services: ReportServices = current_app.extensions[EXTENSION_KEY]

    try:
        submission = decode_submission(request.get_data(cache=False))
    except DecodeError as exc:
        logger.warning("Rejected /generate-pdf request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    renderer = services.html_renderer if submission.is_html_only else services.renderer
    score = submission.score if submission.has_structured_content else None

    try:
        with report_scope(renderer, submission) as report:
            services.mailer.deliver(submission.email, report, score=score)
    except RenderError as exc:
        logger.error("Error generating PDF for %s: %s", submission.email, exc)
        return jsonify({"error": "Failed to generate PDF"}), 500
    except DeliveryError as exc:
        logger.error("Error sending email to %s: %s", submission.email, exc)
        return jsonify({"error": "Failed to send email"}), 500

    return jsonify({"message": SUCCESS_MESSAGE}), 200


@report_bp.route("/health", methods=["GET"])
def health():
    return jsonify({
        "status": "healthy",
        "service": "Cyber Resilience Scorecard Report API",
        "version": __version__,
    })


# ============== REQUEST LOGGING ==============

def _start_timer():
    g.request_started = time.perf_counter()


def _log_request(response):
    started = g.pop("request_started", None)
    elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
    logger.info("%s %s → %d (%.1f ms)", request.method, request.path,
                response.status_code, elapsed_ms)
    return response


# ============== ERROR HANDLERS ==============

def _not_found(error):
    return jsonify({"error": "Endpoint not found"}), 404


def _method_not_allowed(error):
    return jsonify({
        "error": "Method not allowed",
        "message": "Please check the HTTP method for this endpoint",
    }), 405


def _internal_error(error):
    return jsonify({"error": "Internal server error"}), 500


# ============== APP FACTORY ==============

def create_app(
    settings: Settings,
    renderer: Optional[ReportRenderer] = None,
    html_renderer: Optional[ReportRenderer] = None,
    mailer: Optional[ReportMailer] = None,
) -> Flask:
    """Build the Flask app; collaborators default to the real implementations."""
    app = Flask(__name__)

    # Permissive CORS; also answers OPTIONS preflight with an empty body
    CORS(app, send_wildcard=True)

    app.extensions[EXTENSION_KEY] = ReportServices(
        renderer=renderer or PdfReportRenderer(settings.server.output_dir),
        html_renderer=html_renderer or HtmlReportRenderer(
            settings.server.output_dir, binary=settings.server.wkhtmltopdf_bin,
        ),
        mailer=mailer or ReportMailer(settings.smtp),
    )

    app.before_request(_start_timer)
    app.after_request(_log_request)
    app.register_error_handler(404, _not_found)
    app.register_error_handler(405, _method_not_allowed)
    app.register_error_handler(500, _internal_error)

    app.register_blueprint(report_bp)
    return app
