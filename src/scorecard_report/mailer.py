"""
mailer.py – SMTP delivery of rendered scorecard reports
=======================================================
  ReportMailer(smtp_config).deliver(recipient, report, score=None)
    Builds a multipart message (plain text + HTML alternative, PDF
    attachment read from the artifact path) and sends it through the
    configured relay with stdlib smtplib.

    Port 465 → implicit TLS (SMTP_SSL); any other port → plain SMTP with
    STARTTLS when the server advertises it. Login happens only when both
    SMTP_USER and SMTP_PASS are configured; otherwise the message is sent
    unauthenticated. Failures raise DeliveryError; there is no retry.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
import textwrap
from email.errors import MessageError
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from scorecard_report.artifacts import RenderedReport
from scorecard_report.config import SmtpConfig
from scorecard_report.errors import DeliveryError
from scorecard_report.scoring import score_color, score_interpretation

logger = logging.getLogger(__name__)

SUBJECT = "Your Cyber Resilience Scorecard Report"


# ─── Message bodies ──────────────────────────────────────────────────────────

def generate_email_text(score: Optional[int] = None) -> str:
    lines = [
        "Hello,",
        "",
        "Thank you for completing the Cyber Resilience Scorecard.",
        "Your results report is attached to this email as a PDF.",
    ]
    if score is not None:
        lines += ["", f"Overall score: {score}%", score_interpretation(score)]
    lines += ["", "Attached is your results PDF. Enjoy!"]
    return "\n".join(lines)


def generate_email_html(score: Optional[int] = None) -> str:
    score_block = ""
    if score is not None:
        colour = score_color(score).to_hex()
        score_block = f"""
      <div style="margin:20px 0;padding:16px;border-left:6px solid {colour};background:#f9fafb;">
        <div style="font-size:2rem;font-weight:bold;color:{colour};">{score}%</div>
        <div style="color:#374151;">{score_interpretation(score)}</div>
      </div>"""

    return textwrap.dedent(f"""\
    <!DOCTYPE html>
    <html>
    <body style="font-family:Arial,sans-serif;color:#1f2937;max-width:600px;margin:auto;">
      <div style="background:#3b82f6;color:#fff;padding:18px 20px;border-radius:6px;">
        <h2 style="margin:0;">Cyber Resilience Scorecard</h2>
        <div style="font-size:0.9rem;">Assessment Results Report</div>
      </div>
      <p>Thank you for completing the Cyber Resilience Scorecard.</p>{score_block}
      <p>Your full report, including the category breakdown and recommendations
         for improvement, is attached as a PDF.</p>
      <p style="margin-top:24px;font-size:0.8rem;color:#888;text-align:center;">
        Generated by <b>Cyber Resilience Scorecard</b>
      </p>
    </body>
    </html>
    """)


# ─── Delivery adapter ────────────────────────────────────────────────────────

class ReportMailer:
    """Sends a RenderedReport to a recipient through a fixed SMTP relay."""

    def __init__(self, smtp: SmtpConfig):
        self.smtp = smtp

    def build_message(
        self,
        recipient: str,
        report: RenderedReport,
        score: Optional[int] = None,
    ) -> MIMEMultipart:
        try:
            pdf_bytes = report.read_bytes()
        except OSError as exc:
            raise DeliveryError(f"Failed to attach PDF: {exc}", recipient) from exc

        msg = MIMEMultipart("mixed")
        msg["Subject"] = SUBJECT
        msg["From"]    = self.smtp.from_email
        msg["To"]      = recipient

        alt_part = MIMEMultipart("alternative")
        alt_part.attach(MIMEText(generate_email_text(score), "plain", "utf-8"))
        alt_part.attach(MIMEText(generate_email_html(score), "html", "utf-8"))
        msg.attach(alt_part)

        pdf_part = MIMEApplication(pdf_bytes, _subtype="pdf")
        pdf_part.add_header("Content-Disposition", "attachment", filename=report.filename)
        msg.attach(pdf_part)
        return msg

    def deliver(
        self,
        recipient: str,
        report: RenderedReport,
        score: Optional[int] = None,
    ) -> None:
        msg = self.build_message(recipient, report, score)
        try:
            raw = msg.as_string()
        except (MessageError, ValueError) as exc:
            logger.error("Could not serialise report email for %r: %s", recipient, exc)
            raise DeliveryError(f"Failed to build email: {exc}", recipient) from exc

        cfg = self.smtp
        try:
            if cfg.port == 465:
                ctx = ssl.create_default_context()
                with smtplib.SMTP_SSL(cfg.host, cfg.port, context=ctx, timeout=cfg.timeout) as server:
                    self._send(server, recipient, raw)
            else:
                with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout) as server:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                    self._send(server, recipient, raw)
        except smtplib.SMTPAuthenticationError as exc:
            logger.error("SMTP authentication failed for %s@%s", cfg.user, cfg.host)
            raise DeliveryError(
                "Failed to send email: authentication rejected. "
                "Check SMTP_USER and SMTP_PASS.",
                recipient,
            ) from exc
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send report to %s via %s:%d: %s",
                         recipient, cfg.host, cfg.port, exc)
            raise DeliveryError(f"Failed to send email: {exc}", recipient) from exc

        logger.info("Report %s emailed to %s", report.filename, recipient)

    def _send(self, server: smtplib.SMTP, recipient: str, raw: str) -> None:
        if self.smtp.auth_enabled:
            server.login(self.smtp.user, self.smtp.password)
        server.sendmail(self.smtp.from_email, [recipient], raw)
