"""
scorecard_report — Cyber Resilience Scorecard PDF Report Service
================================================================
Accepts a scorecard assessment result over HTTP, renders it into a PDF
report and emails the PDF to the submitter.

Module map
----------
  models.py          Pydantic request models, recommendation status enum,
                     and the JSON body decoder.
  scoring.py         Score → colour / interpretation step function.
  layout.py          Layout cursor, recommendation grouping and page-break
                     planning (no drawing).
  pdf_report.py      reportlab canvas renderer for the structured report.
  html_report.py     wkhtmltopdf renderer for raw HTML submissions.
  artifacts.py       RenderedReport artifact + request-scoped cleanup.
  mailer.py          SMTP delivery of the rendered report.
  config.py          Settings loaded from .env / environment.
  errors.py          Service exception taxonomy.
  app.py             Flask application factory (POST /generate-pdf).
  server.py          Process entry point: logging, settings, listener.

Request flow
------------
  POST /generate-pdf → decode_submission → renderer.render
  → ReportMailer.deliver → RenderedReport.discard → 200 JSON
"""
__version__ = "0.1.0"
