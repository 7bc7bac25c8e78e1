"""Email templates.

A template is a JSON document with a "subject" and a "body" field. Custom
templates are stored as JSON text in global_options; when none is set the
built-in defaults below are used.

Placeholders use Jinja2 syntax ({{ toName }}) and are rendered in a
SandboxedEnvironment, so stored templates can substitute data but cannot
reach Python internals. Missing variables render as empty strings. The body
is HTML and is autoescaped; the subject is plain text and is folded onto a
single line.

A template that is not a {subject, body} mapping of strings, or that does
not compile, raises TemplateError. That is a configuration problem and is
surfaced to the caller rather than swallowed.
"""

import json
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from jinja2 import TemplateSyntaxError
from jinja2.exceptions import SecurityError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from ..exceptions import TemplateError

_subject_env = SandboxedEnvironment(autoescape=False)
_body_env = SandboxedEnvironment(autoescape=True)

_LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


class RenderedTemplate(NamedTuple):
    """A template with all variables substituted."""

    subject: str
    body: str


def notification_template() -> dict[str, str]:
    """Default admin notification template.

    Variables: toName, notificationMessage
    """
    return {
        "subject": "New user registration",
        "body": (
            "Hello {{ toName }},<br /><br />"
            "{{ notificationMessage }}<br /><br />"
            "Sincerely,<br />--<br />Account notifications"
        ),
    }


def forgot_password_template() -> dict[str, str]:
    """Default forgot-password template.

    Variables: toEmail, forgotLink
    """
    return {
        "subject": "Password reset",
        "body": (
            "Hello {{ toEmail }},<br /><br />"
            "We received a request to reset the password for your account. "
            "Follow the link below to choose a new password:<br /><br />"
            '<a href="{{ forgotLink }}">{{ forgotLink }}</a><br /><br />'
            "The link expires in 15 minutes. If you did not request a password "
            "reset you can ignore this email."
        ),
    }


class EmailTemplate:
    """A parsed and compiled {subject, body} template."""

    def __init__(self, subject: str, body: str):
        try:
            self._subject = _subject_env.from_string(subject)
            self._body = _body_env.from_string(body)
        except TemplateSyntaxError as e:
            raise TemplateError(
                "Email template has a syntax error",
                {"line": e.lineno, "error": e.message}
            ) from e

    def render(self, variables: Mapping[str, Any]) -> RenderedTemplate:
        """Substitute variables into subject and body.

        Raises:
            TemplateError: If rendering hits a sandbox violation or misuses
                an undefined value (e.g. calling a missing variable)
        """
        try:
            return RenderedTemplate(
                subject=_LINE_BREAKS.sub(" ", self._subject.render(variables)).strip(),
                body=self._body.render(variables),
            )
        except (SecurityError, UndefinedError) as e:
            raise TemplateError(
                "Email template could not be rendered",
                {"error": str(e)}
            ) from e


def load_template(raw: Mapping[str, Any] | str) -> EmailTemplate:
    """Parse and compile a template document.

    Args:
        raw: A mapping or a JSON string with string "subject" and "body" fields

    Raises:
        TemplateError: If the document is not valid JSON, not an object, or
            lacks string subject/body fields, or does not compile
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise TemplateError(
                "Email template is not valid JSON",
                {"error": str(e)}
            ) from e

    if not isinstance(raw, Mapping):
        raise TemplateError("Email template must be a JSON object")

    missing = [
        field for field in ("subject", "body")
        if not isinstance(raw.get(field), str)
    ]
    if missing:
        raise TemplateError(
            "Email template must have string subject and body fields",
            {"missing": missing}
        )

    return EmailTemplate(raw["subject"], raw["body"])


def render(raw: Mapping[str, Any] | str, variables: Mapping[str, Any]) -> RenderedTemplate:
    """Parse a template document and render it in one step."""
    return load_template(raw).render(variables)
