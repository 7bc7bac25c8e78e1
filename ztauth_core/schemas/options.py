"""Global options schema.

The global_options row is administered outside this core. It is loaded once
per operation and passed explicitly to the code that needs it.
"""

import sqlite3

from pydantic import BaseModel


class SmtpSettings(BaseModel):
    """Outbound mail transport settings."""

    host: str | None = None
    port: int = 587
    secure: bool = False  # Implicit TLS (SMTPS). Otherwise STARTTLS when offered.
    email: str | None = None  # Sender address
    username: str | None = None
    password: str | None = None


class GlobalOptions(BaseModel):
    """Singleton runtime configuration record."""

    enable_registration: bool = True
    user_registration_notification: bool = False
    notification_template: str | None = None
    forgot_password_template: str | None = None
    smtp: SmtpSettings = SmtpSettings()

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "GlobalOptions":
        """Build from a global_options table row."""
        return cls(
            enable_registration=bool(row["enable_registration"]),
            user_registration_notification=bool(row["user_registration_notification"]),
            notification_template=row["notification_template"],
            forgot_password_template=row["forgot_password_template"],
            smtp=SmtpSettings(
                host=row["smtp_host"],
                port=row["smtp_port"],
                secure=bool(row["smtp_secure"]),
                email=row["smtp_email"],
                username=row["smtp_username"],
                password=row["smtp_password"],
            ),
        )
