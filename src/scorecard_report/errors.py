"""
errors.py — Exception taxonomy for the report service
=====================================================
Every failure the request pipeline can hit maps onto one of these:

  DecodeError     empty / malformed / invalid request body   → HTTP 400
  RenderError     PDF construction or file-write failure     → HTTP 500
  DeliveryError   attachment or SMTP transport failure       → HTTP 500
  ConfigError     missing/invalid environment at startup     → exit(1)
"""

from __future__ import annotations


class ReportServiceError(RuntimeError):
    """Base class for all report service failures."""


class DecodeError(ReportServiceError):
    """Raised when the inbound request body cannot be decoded."""


class RenderError(ReportServiceError):
    """Raised when the report document cannot be built or written."""


class DeliveryError(ReportServiceError):
    """Raised when the rendered report cannot be attached or sent.

    Attributes:
        recipient: Address the report was being sent to.
    """

    def __init__(self, message: str, recipient: str = "") -> None:
        self.recipient = recipient
        super().__init__(message)


class ConfigError(ReportServiceError):
    """Raised when required environment configuration is missing or invalid.

    Attributes:
        variables: Names of the offending environment variables.
    """

    def __init__(self, variables: list[str], reason: str = "missing") -> None:
        self.variables = list(variables)
        super().__init__(
            f"{reason.capitalize()} environment configuration: {', '.join(self.variables)}. "
            "Set them in your environment or .env file."
        )
