"""Best-effort notification dispatch.

Each message is sent at most once, with no retries. A delivery failure is
logged and recorded; it never stops the remaining messages and never
reaches the operation that triggered the notification.
"""

import logging
from collections.abc import Iterable
from typing import NamedTuple

from ..exceptions import DeliveryError
from .transport import MailMessage, Transport, send_email

logger = logging.getLogger(__name__)


class DeliveryFailure(NamedTuple):
    """A message that could not be delivered."""

    to: str
    error: str


def dispatch(transporter: Transport, message: MailMessage) -> None:
    """Send a single message.

    Raises:
        DeliveryError: If delivery fails
    """
    send_email(transporter, message)


def dispatch_all(
    transporter: Transport,
    messages: Iterable[MailMessage]
) -> list[DeliveryFailure]:
    """Send every message independently.

    Returns:
        The failures, in send order. Empty when everything was delivered.
    """
    failures = []
    for message in messages:
        try:
            dispatch(transporter, message)
        except DeliveryError as e:
            logger.error(f"Email delivery to {message.to} failed: {e.message}")
            failures.append(DeliveryFailure(message.to, e.message))
    return failures
