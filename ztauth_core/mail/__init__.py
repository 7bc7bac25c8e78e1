"""Templated email notifications.

- templates: parse and render {subject, body} templates
- transport: SMTP delivery of a single message
- dispatcher: best-effort fan-out with per-recipient failure isolation
"""

from . import dispatcher, templates, transport

__all__ = ["dispatcher", "templates", "transport"]
