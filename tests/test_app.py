"""
HTTP-level tests for the Flask application (app.py), driven through
Flask's test client.
"""
import email
import json

import pytest
from factories import (
    FailingMailer,
    FailingRenderer,
    RecordingMailer,
    StubRenderer,
    make_payload,
)

from scorecard_report.app import SUCCESS_MESSAGE, create_app
from scorecard_report.mailer import ReportMailer


def _post(client, payload):
    return client.post("/generate-pdf", data=json.dumps(payload),
                       content_type="application/json")


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def html_renderer(tmp_path):
    return StubRenderer(tmp_path / "html_out")


@pytest.fixture
def client(settings, renderer, html_renderer, mailer):
    app = create_app(settings, renderer=renderer, html_renderer=html_renderer, mailer=mailer)
    app.testing = True
    return app.test_client()


# ─── End-to-end ───────────────────────────────────────────────────────────────

class TestGeneratePdfEndToEnd:
    def test_success_with_stub_relay(self, settings, renderer, output_dir, fake_smtp):
        app = create_app(settings, renderer=renderer, mailer=ReportMailer(settings.smtp))
        resp = _post(app.test_client(), {
            "email": "a@b.com",
            "score": 85,
            "categoryScores": [{"name": "Network", "score": 8, "max": 10, "percentage": 80}],
            "recommendations": [{"category": "Network", "text": "Enable MFA", "status": "missing"}],
        })

        assert resp.status_code == 200
        assert resp.get_json() == {"message": SUCCESS_MESSAGE}

        [server] = fake_smtp.instances
        assert len(server.sent) == 1
        _, to_addrs, raw = server.sent[0]
        assert to_addrs == ["a@b.com"]
        msg = email.message_from_string(raw)
        attachments = [p for p in msg.walk() if p.get_content_disposition() == "attachment"]
        assert len(attachments) == 1
        assert attachments[0].get_payload(decode=True)[:4] == b"%PDF"

    def test_artifact_removed_after_success(self, client, mailer, output_dir):
        resp = _post(client, make_payload())
        assert resp.status_code == 200
        [delivery] = mailer.deliveries
        assert delivery["content"][:4] == b"%PDF"
        assert not delivery["path"].exists()
        assert list(output_dir.iterdir()) == []

    def test_score_passed_to_mailer(self, client, mailer):
        _post(client, make_payload(score=42))
        assert mailer.deliveries[0]["score"] == 42
        assert mailer.deliveries[0]["recipient"] == "a@b.com"

    def test_html_only_uses_html_renderer(self, client, mailer, html_renderer):
        resp = _post(client, {"email": "a@b.com", "htmlContent": "<h1>Results</h1>"})
        assert resp.status_code == 200
        assert len(html_renderer.calls) == 1
        assert mailer.deliveries[0]["score"] is None

    def test_structured_submission_skips_html_renderer(self, client, html_renderer):
        _post(client, make_payload(htmlContent="<h1>ignored</h1>"))
        assert html_renderer.calls == []


# ─── Client errors ────────────────────────────────────────────────────────────

class TestClientErrors:
    def test_malformed_json_is_400_without_render(self, settings, mailer, tmp_path):
        renderer = StubRenderer(tmp_path)
        client = create_app(settings, renderer=renderer, mailer=mailer).test_client()
        resp = client.post("/generate-pdf", data="{not json",
                           content_type="application/json")
        assert resp.status_code == 400
        assert "error" in resp.get_json()
        assert renderer.calls == []
        assert mailer.deliveries == []

    def test_empty_body_is_400(self, client, mailer):
        resp = client.post("/generate-pdf", data="", content_type="application/json")
        assert resp.status_code == 400
        assert mailer.deliveries == []

    def test_invalid_field_is_400(self, client, mailer):
        resp = _post(client, make_payload(score=150))
        assert resp.status_code == 400
        assert "score" in resp.get_json()["error"]
        assert mailer.deliveries == []

    def test_email_with_embedded_header_is_400_without_render(self, settings, mailer, tmp_path):
        renderer = StubRenderer(tmp_path)
        client = create_app(settings, renderer=renderer, mailer=mailer).test_client()
        resp = _post(client, {"email": "a@b.com\r\nBcc: victim@evil.test", "score": 85})
        assert resp.status_code == 400
        assert "email" in resp.get_json()["error"]
        assert renderer.calls == []
        assert mailer.deliveries == []

    def test_missing_email_is_400(self, client):
        payload = make_payload()
        del payload["email"]
        assert _post(client, payload).status_code == 400


# ─── Server errors ────────────────────────────────────────────────────────────

class TestServerErrors:
    def test_render_failure_is_500_without_delivery(self, settings, mailer):
        client = create_app(settings, renderer=FailingRenderer(), mailer=mailer).test_client()
        resp = _post(client, make_payload())
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to generate PDF"}
        assert mailer.deliveries == []

    def test_delivery_failure_is_500_and_cleans_up(self, settings, renderer, output_dir):
        mailer = FailingMailer()
        client = create_app(settings, renderer=renderer, mailer=mailer).test_client()
        resp = _post(client, make_payload())
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to send email"}
        [report] = mailer.reports
        assert not report.path.exists()
        assert list(output_dir.iterdir()) == []


# ─── Routing, CORS & health ───────────────────────────────────────────────────

class TestRouting:
    def test_options_preflight(self, client):
        resp = client.options("/generate-pdf", headers={
            "Origin": "https://scorecard.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        })
        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] in ("*", "https://scorecard.example.com")
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]
        assert resp.data == b""

    def test_cors_header_on_post(self, client):
        resp = client.post("/generate-pdf", data="", content_type="application/json",
                           headers={"Origin": "https://scorecard.example.com"})
        assert resp.headers["Access-Control-Allow-Origin"] in ("*", "https://scorecard.example.com")

    def test_get_not_allowed(self, client):
        resp = client.get("/generate-pdf")
        assert resp.status_code == 405
        assert resp.get_json()["error"] == "Method not allowed"

    def test_unknown_route(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Endpoint not found"}

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "healthy"
