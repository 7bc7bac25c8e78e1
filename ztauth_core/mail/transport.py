"""SMTP mail transport.

create_transporter() builds a transport from the global options' SMTP
settings; send_email() delivers one message through it. Every failure is
reported as DeliveryError so callers can isolate it.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import NamedTuple, Protocol

from ..exceptions import DeliveryError
from ..schemas.options import GlobalOptions, SmtpSettings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


class MailMessage(NamedTuple):
    """A rendered email ready to send."""

    from_addr: str | None
    to: str
    subject: str
    html: str


class Transport(Protocol):
    """Anything that can deliver a MailMessage."""

    def send(self, message: MailMessage) -> None:
        ...


@dataclass(frozen=True)
class SmtpTransport:
    """Sends mail through an SMTP server, one connection per message."""

    settings: SmtpSettings

    def _connect(self) -> smtplib.SMTP:
        if self.settings.secure:
            return smtplib.SMTP_SSL(
                self.settings.host, self.settings.port, timeout=SMTP_TIMEOUT_SECONDS
            )
        return smtplib.SMTP(
            self.settings.host, self.settings.port, timeout=SMTP_TIMEOUT_SECONDS
        )

    def send(self, message: MailMessage) -> None:
        if not self.settings.host:
            raise DeliveryError("SMTP host is not configured")

        sender = message.from_addr or self.settings.email
        if not sender:
            raise DeliveryError("Sender address is not configured")

        msg = MIMEMultipart("alternative")
        msg["From"] = sender
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg.attach(MIMEText(message.html, "html"))

        with self._connect() as server:
            if not self.settings.secure:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls()
                    server.ehlo()
            if self.settings.username:
                server.login(self.settings.username, self.settings.password or "")
            server.send_message(msg, to_addrs=[message.to])


def create_transporter(options: GlobalOptions) -> SmtpTransport:
    """Create a transport from the global options' SMTP settings.

    No connection is opened until a message is sent.
    """
    return SmtpTransport(options.smtp)


def send_email(transporter: Transport, message: MailMessage) -> None:
    """Deliver one message.

    Raises:
        DeliveryError: If the transport is misconfigured, the message cannot
            be serialized (e.g. a header with an embedded line break), or the
            server rejects or drops the message
    """
    try:
        transporter.send(message)
    except DeliveryError:
        raise
    except (smtplib.SMTPException, OSError, MessageError, ValueError) as e:
        raise DeliveryError(
            f"Failed to send email: {e}",
            {"to": message.to}
        ) from e

    logger.info(f"Email sent to {message.to}")
