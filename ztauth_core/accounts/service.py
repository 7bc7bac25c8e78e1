"""Account lifecycle operations.

This module composes the password policy, credential hashing, reset tokens,
templates and the notification dispatcher into the account operations:

- register                 Create an account (first account becomes ADMIN)
- login                    Verify credentials and issue an access token
- me                       Fetch the acting user
- update                   Change email, name and/or password
- request_password_reset   Email a reset link (enumeration-safe)
- redeem_password_reset    Set a new password from a reset link

Every operation takes a database Core and loads the global options itself,
once, when it needs them. Notification delivery is best-effort everywhere:
failures are logged and never change the outcome of the operation.
Template errors are configuration errors and do surface.
"""

import logging
import sqlite3
from collections.abc import Callable

from ..auth import password as password_policy
from ..auth import reset_token, service as credentials, token as access_token
from ..auth.schemas import (
    LoginRequest,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    TokenResponse,
    UpdateRequest,
    UserResponse,
    normalize_email,
)
from ..config import settings
from ..db import Core
from ..exceptions import (
    AuthenticationError,
    Conflict,
    RegistrationDisabled,
    ResourceNotFound,
    TemplateError,
    ValidationError,
)
from ..mail import dispatcher, templates, transport
from ..schemas.options import GlobalOptions

logger = logging.getLogger(__name__)

TransportFactory = Callable[[GlobalOptions], transport.Transport]

RESET_REQUESTED_MESSAGE = "Mail sent if email exist!"
RESET_REDEEMED_MESSAGE = "Password has been reset"
INVALID_RESET_TOKEN_MESSAGE = "token is not valid, please try again!"


def row_to_user(row: sqlite3.Row) -> UserResponse:
    """Convert a users table row to a UserResponse (drops the hash)."""
    return UserResponse(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        role=row["role"],
        last_login=row["last_login"],
        created_at=row["created_at"],
    )


def _reset_link(token: str) -> str:
    return f"{settings.base_url.rstrip('/')}/login/forgotpassword?token={token}"


def _notify(
    options: GlobalOptions,
    messages: list[transport.MailMessage],
    transport_factory: TransportFactory | None,
) -> None:
    """Hand messages to the dispatcher. Never raises DeliveryError."""
    if not messages:
        return
    factory = transport_factory or transport.create_transporter
    failures = dispatcher.dispatch_all(factory(options), messages)
    if failures:
        logger.debug(f"{len(failures)} of {len(messages)} notification(s) not delivered")


# ============================================================================
# Registration
# ============================================================================


def _admin_notifications(
    core: Core,
    options: GlobalOptions,
    template: templates.EmailTemplate,
    notification_message: str,
) -> list[transport.MailMessage]:
    messages = []
    for admin in core.users.list_admins():
        rendered = template.render({
            "toName": admin["name"],
            "notificationMessage": notification_message,
        })
        messages.append(transport.MailMessage(
            from_addr=options.smtp.email,
            to=admin["email"],
            subject=rendered.subject,
            html=rendered.body,
        ))
    return messages


def register(
    core: Core,
    data: RegisterRequest,
    transport_factory: TransportFactory | None = None,
) -> UserResponse:
    """
    Register a new account.

    The first account ever created is promoted to ADMIN, all later accounts
    are USER. When registration notifications are enabled every admin gets
    an email; delivery failures are logged and skipped.

    Raises:
        RegistrationDisabled: If registration is turned off
        ValidationError: If the email is empty
        Conflict: If the email is already registered (any letter case)
        PolicyViolation: If the password is too weak
        TemplateError: If the custom notification template is malformed or
            fails to render. Checked before the account is written.
    """
    options = core.options.get()

    if not options.enable_registration:
        raise RegistrationDisabled(
            "Registration is disabled! Please contact the administrator."
        )

    email = normalize_email(data.email)
    if not email:
        raise ValidationError("Email required!")

    if core.users.find_by_email(email) is not None:
        raise Conflict(f'email "{email}" already taken', {"email": email})

    password_policy.require_strong_password(
        data.password, "Password does not meet the requirements!"
    )

    notification_message = (
        f"A new user with the name {data.name} and email {email} has just registered!"
    )

    # Fail on a broken template before anything is written
    template = None
    if options.user_registration_notification:
        template = templates.load_template(
            options.notification_template or templates.notification_template()
        )
        template.render({"toName": data.name, "notificationMessage": notification_message})

    password_hash = credentials.hash_password(data.password)

    try:
        user_id = core.users.create(email, data.name, password_hash)
        core.commit()
    except sqlite3.IntegrityError:
        core.rollback()
        raise Conflict(f'email "{email}" already taken', {"email": email})

    user = row_to_user(core.users.find_by_id(user_id))
    logger.info(f"User registered: {user.email} ({user.role})")

    if template is not None:
        try:
            messages = _admin_notifications(
                core, options, template, notification_message
            )
        except TemplateError as e:
            logger.error(f"Registration notification not sent: {e.message}")
        else:
            _notify(options, messages, transport_factory)

    return user


# ============================================================================
# Login and Profile
# ============================================================================


def login(core: Core, data: LoginRequest) -> TokenResponse:
    """
    Verify email and password, stamp last_login, issue an access token.

    Raises:
        AuthenticationError: If the email is unknown or the password is wrong
    """
    row = core.users.find_by_email(data.email)
    if row is None or not credentials.verify_password(data.password, row["hash"]):
        logger.warning(f"Failed login attempt for email: {data.email}")
        raise AuthenticationError("Invalid email or password", {"email": data.email})

    core.users.touch_last_login(row["id"])
    core.commit()

    user = row_to_user(core.users.find_by_id(row["id"]))
    logger.info(f"Successful login: {user.email}")

    return TokenResponse(
        access_token=access_token.generate_access_token(user),
        token_type="bearer",
        user=user,
    )


def me(core: Core, user_id: str) -> UserResponse:
    """
    Get the acting user.

    Raises:
        ResourceNotFound: If the user no longer exists
    """
    row = core.users.find_by_id(user_id)
    if row is None:
        raise ResourceNotFound("User not found!", {"user_id": user_id})
    return row_to_user(row)


def update(core: Core, user_id: str, data: UpdateRequest) -> UserResponse:
    """
    Update the acting user's email, name and/or password.

    A password change needs the current password, the new password and the
    repeated new password together. Empty values leave the stored field
    unchanged.

    Raises:
        ResourceNotFound: If the user no longer exists
        ValidationError: If password fields are partially supplied or the
            new passwords differ
        PolicyViolation: If the new password is too weak
        AuthenticationError: If the current password is wrong
        Conflict: If the new email belongs to another account
    """
    row = core.users.find_by_id(user_id)
    if row is None:
        raise ResourceNotFound("User not found!", {"user_id": user_id})

    new_hash = None
    if data.password or data.new_password or data.repeat_new_password:
        if not (data.password and data.new_password and data.repeat_new_password):
            raise ValidationError("Please fill all fields!")

        password_policy.require_strong_password(
            data.new_password, "New password does not meet the requirements!"
        )

        if not credentials.verify_password(data.password, row["hash"]):
            logger.warning(f"Incorrect current password on update for user {user_id}")
            raise AuthenticationError("Old password is incorrect!")

        if data.new_password != data.repeat_new_password:
            raise ValidationError("Passwords do not match!")

        new_hash = credentials.hash_password(data.new_password)

    email = data.email or row["email"]
    if email != row["email"]:
        existing = core.users.find_by_email(email)
        if existing is not None and existing["id"] != user_id:
            raise Conflict(f'email "{email}" already taken', {"email": email})

    try:
        core.users.update(user_id, {
            "email": email,
            "name": data.name or row["name"],
            "hash": new_hash,
        })
        core.commit()
    except sqlite3.IntegrityError:
        core.rollback()
        raise Conflict(f'email "{email}" already taken', {"email": email})

    if new_hash is not None:
        logger.info(f"Password changed for user {user_id}")

    return row_to_user(core.users.find_by_id(user_id))


# ============================================================================
# Password Reset
# ============================================================================


def request_password_reset(
    core: Core,
    data: PasswordResetRequest,
    transport_factory: TransportFactory | None = None,
) -> MessageResponse:
    """
    Email a password reset link if the account exists.

    The response is identical whether or not the email is registered.
    Delivery failures are logged and not reported to the caller.

    Raises:
        TemplateError: If the custom forgot-password template is malformed
    """
    response = MessageResponse(message=RESET_REQUESTED_MESSAGE)

    email = normalize_email(data.email)
    row = core.users.find_by_email(email)
    if row is None:
        logger.info("Password reset requested for unknown email")
        return response

    token = reset_token.issue_reset_token(row["id"], row["email"], row["hash"])

    options = core.options.get()
    rendered = templates.render(
        options.forgot_password_template or templates.forgot_password_template(),
        {"toEmail": row["email"], "forgotLink": _reset_link(token)},
    )

    _notify(options, [transport.MailMessage(
        from_addr=options.smtp.email,
        to=row["email"],
        subject=rendered.subject,
        html=rendered.body,
    )], transport_factory)

    logger.info(f"Password reset link issued for user {row['id']}")
    return response


def redeem_password_reset(core: Core, data: PasswordResetConfirm) -> MessageResponse:
    """
    Set a new password using a reset link token.

    The token is verified against the user's current credential hash, so it
    stops working once the password changes, including after this call.
    Everything after the input checks fails with one generic message; the
    real cause is only logged.

    Raises:
        ValidationError: If the two password fields differ
        PolicyViolation: If the password is too weak
        AuthenticationError: If the token is invalid, expired, already used,
            or anything else goes wrong while redeeming it
    """
    if data.password != data.new_password:
        raise ValidationError("Passwords does not match!")

    password_policy.require_strong_password(
        data.password, "Password does not meet the requirements!"
    )

    try:
        claims = reset_token.decode_reset_token(data.token)
        user_id = claims.get("id")
        if not user_id:
            raise AuthenticationError("This link is not valid!")

        row = core.users.find_by_id(str(user_id))
        if row is None or not row["hash"]:
            raise ResourceNotFound("Something went wrong!")

        reset_token.verify_reset_token(data.token, row["hash"])

        core.users.update(row["id"], {"hash": credentials.hash_password(data.password)})
        core.commit()
    except Exception as e:
        core.rollback()
        logger.warning(f"Password reset redeem failed: {e}")
        raise AuthenticationError(INVALID_RESET_TOKEN_MESSAGE) from e

    logger.info(f"Password reset completed for user {row['id']}")
    return MessageResponse(message=RESET_REDEEMED_MESSAGE)


__all__ = [
    "INVALID_RESET_TOKEN_MESSAGE",
    "RESET_REDEEMED_MESSAGE",
    "RESET_REQUESTED_MESSAGE",
    "login",
    "me",
    "redeem_password_reset",
    "register",
    "request_password_reset",
    "row_to_user",
    "update",
]
