"""
config.py — Central settings for the Scorecard Report Service
=============================================================
All configuration is loaded from environment variables / .env file,
once at process start, into immutable dataclasses that are then passed
explicitly to the components that need them.

Required:  SMTP_HOST, FROM_EMAIL
Optional:  SMTP_PORT (587), SMTP_USER / SMTP_PASS (auth when both set),
           SMTP_TIMEOUT (15), HOST (0.0.0.0), PORT (3000),
           PDF_OUTPUT_DIR (pdf_output), WKHTMLTOPDF_BIN (wkhtmltopdf),
           LOG_LEVEL (INFO)
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from scorecard_report.errors import ConfigError

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)


# ─── SMTP relay ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SmtpConfig:
    host:       str
    port:       int
    user:       str
    password:   str
    from_email: str
    timeout:    float = 15.0

    @property
    def auth_enabled(self) -> bool:
        """True only when both a username and a password are configured."""
        return bool(self.user) and bool(self.password)


# ─── HTTP listener & rendering ───────────────────────────────────────────────

@dataclass(frozen=True)
class ServerConfig:
    host:            str
    port:            int
    output_dir:      str
    wkhtmltopdf_bin: str
    log_level:       str


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    smtp:   SmtpConfig
    server: ServerConfig

    def status_summary(self) -> dict[str, str]:
        """Return a dict of setting → value that is safe to log (no password)."""
        return {
            "SMTP relay": f"{self.smtp.host}:{self.smtp.port}",
            "SMTP auth":  "enabled" if self.smtp.auth_enabled else "disabled",
            "From":       self.smtp.from_email,
            "Listen":     f"{self.server.host}:{self.server.port}",
            "Output dir": self.server.output_dir,
        }


def _parse_number(name: str, default, invalid: list[str], cast=int):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        invalid.append(name)
        return default
    if not math.isfinite(value) or value <= 0:
        invalid.append(name)
        return default
    return value


def get_settings() -> Settings:
    """Load all configuration from environment variables.

    Raises ConfigError when a required variable is missing or a numeric
    variable cannot be parsed.
    """
    _str = lambda k, d="": os.getenv(k, d).strip()

    missing = [k for k in ("SMTP_HOST", "FROM_EMAIL") if not _str(k)]
    if missing:
        raise ConfigError(missing)

    invalid: list[str] = []
    smtp_port = _parse_number("SMTP_PORT", 587, invalid)
    http_port = _parse_number("PORT", 3000, invalid)
    timeout   = _parse_number("SMTP_TIMEOUT", 15.0, invalid, cast=float)
    if invalid:
        raise ConfigError(invalid, reason="invalid")

    return Settings(
        smtp=SmtpConfig(
            host       = _str("SMTP_HOST"),
            port       = smtp_port,
            user       = _str("SMTP_USER"),
            password   = _str("SMTP_PASS"),
            from_email = _str("FROM_EMAIL"),
            timeout    = timeout,
        ),
        server=ServerConfig(
            host            = _str("HOST", "0.0.0.0"),
            port            = http_port,
            output_dir      = _str("PDF_OUTPUT_DIR", "pdf_output"),
            wkhtmltopdf_bin = _str("WKHTMLTOPDF_BIN", "wkhtmltopdf"),
            log_level       = _str("LOG_LEVEL", "INFO").upper(),
        ),
    )
