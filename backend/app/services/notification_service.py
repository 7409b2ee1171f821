"""
Invite emails for newly created accounts.
"""
import logging
import smtplib
from email.message import EmailMessage
from app.core.config import settings
from app.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


def _invite_text(login_email: str, temp_password: str) -> str:
    return (
        "Your account is ready.\n\n"
        f"Login email: {login_email}\n"
        f"Temporary password: {temp_password}\n\n"
        f"Open the app: {settings.APP_URL}\n"
        "Please sign in and change your password immediately."
    )


def _invite_html(login_email: str, temp_password: str) -> str:
    return f"""
    <div style="font-family:system-ui,Segoe UI,Arial;line-height:1.6;color:#111">
      <h2 style="margin:0 0 12px">Your account is ready</h2>
      <p>Welcome! We've created your account. Use the details below to sign in:</p>
      <p style="padding:12px 16px;background:#f6f6f6;border-radius:8px">
        <strong>Login email:</strong> {login_email}<br/>
        <strong>Temporary password:</strong> {temp_password}
      </p>
      <p>Please sign in and change your password immediately.</p>
      <p><a href="{settings.APP_URL}">Open the app</a></p>
    </div>"""


def build_invite_message(to: str, temp_password: str) -> EmailMessage:
    """Plain-text invite with an HTML alternative."""
    message = EmailMessage()
    message["Subject"] = "Your account is ready"
    message["From"] = settings.MAIL_FROM
    message["To"] = to
    message.set_content(_invite_text(to, temp_password))
    message.add_alternative(_invite_html(to, temp_password), subtype="html")
    return message


def send_invite(email: str, temp_password: str) -> None:
    """
    Deliver the invite over SMTP.

    Raises NotificationError on any failure; callers keep the account and
    report the failure instead of rolling back.
    """
    if not settings.SMTP_HOST:
        logger.warning("SMTP_HOST is not configured. Invite email not sent.")
        raise NotificationError("Mail delivery is not configured")

    message = build_invite_message(email, temp_password)
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USER:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send invite to {email}: {e}")
        raise NotificationError(str(e)) from e

    logger.info(f"Invite email sent to {email}")
