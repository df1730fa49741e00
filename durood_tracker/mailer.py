# durood_tracker/mailer.py
import logging
import smtplib
from email.message import EmailMessage

from flask import current_app

logger = logging.getLogger(__name__)


class MailNotConfigured(RuntimeError):
    pass


def send_email(to_email: str, subject: str, body: str) -> None:
    cfg = current_app.config
    smtp_host = (cfg.get("SMTP_HOST") or "").strip()

    if not smtp_host:
        logger.warning("[mail DEV] to=%s subject=%r\n%s", to_email, subject, body)
        raise MailNotConfigured("Email service not configured")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = cfg.get("SMTP_FROM") or cfg.get("SMTP_USER")
    msg["To"] = to_email
    msg.set_content(body)

    with smtplib.SMTP(smtp_host, int(cfg.get("SMTP_PORT", 587)), timeout=15) as smtp:
        if cfg.get("SMTP_USE_TLS", True):
            smtp.starttls()
        if cfg.get("SMTP_USER"):
            smtp.login(cfg["SMTP_USER"], cfg.get("SMTP_PASS", ""))
        smtp.send_message(msg)

    logger.info("Sent %r to %s", subject, to_email)


def send_password_reset_email(to_email: str, reset_url: str) -> None:
    send_email(
        to_email,
        "Password Reset Request - Durood Tracker",
        "Assalamu Alaikum,\n\n"
        "You have requested to reset your password for your Durood Tracker account.\n"
        f"Open this link to choose a new password:\n\n{reset_url}\n\n"
        "This link will expire in 1 hour.\n"
        "If you didn't request this password reset, please ignore this email.\n",
    )


def send_verification_email(to_email: str, verification_url: str) -> None:
    send_email(
        to_email,
        "Verify your email - Durood Tracker",
        "Assalamu Alaikum,\n\n"
        "Welcome to Durood Tracker! Please confirm your email address:\n\n"
        f"{verification_url}\n\n"
        "This link will expire in 24 hours.\n",
    )
