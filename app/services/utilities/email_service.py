"""
Email Service
=============

SMTP delivery for account e-mails: verification codes, password-recovery
codes and profile / password change notices.

Sending is best-effort: an unconfigured SMTP host or a delivery failure is
logged and reported as ``False``, never raised to the request.
"""

from __future__ import annotations

import html
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

logger = logging.getLogger(__name__)


@dataclass
class EmailConfig:
    """Configuration for email sending."""

    smtp_host: str
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    from_address: str | None = None
    from_name: str = "Healthy Habits"

    @property
    def sender(self) -> str:
        """Get the sender address."""
        return self.from_address or self.smtp_username or "healthy@localhost"

    @property
    def configured(self) -> bool:
        return bool(self.smtp_host)


@dataclass
class EmailMessage:
    """Represents an email message."""

    to_address: str
    subject: str
    body_text: str
    body_html: str | None = None

    def to_mime(self, from_header: str) -> MIMEMultipart:
        """Convert to MIME message."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = self.subject
        msg["From"] = from_header
        msg["To"] = self.to_address

        msg.attach(MIMEText(self.body_text, "plain", "utf-8"))
        if self.body_html:
            msg.attach(MIMEText(self.body_html, "html", "utf-8"))

        return msg


class EmailService:
    """
    Email sending service.

    Provides a clean interface for sending emails via SMTP.
    Supports STARTTLS and HTML content.
    """

    def __init__(self, config: EmailConfig | None = None):
        self._config = config

    @property
    def enabled(self) -> bool:
        return self._config is not None and self._config.configured

    def send(self, message: EmailMessage) -> bool:
        """
        Send an email message.

        Returns:
            True if email was sent successfully, False otherwise.
        """
        cfg = self._config
        if cfg is None or not cfg.configured:
            logger.info("SMTP not configured; skipping e-mail '%s' to %s", message.subject, message.to_address)
            return False

        try:
            mime_msg = message.to_mime(formataddr((cfg.from_name, cfg.sender)))
            with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=15) as server:
                if cfg.smtp_use_tls:
                    server.starttls(context=ssl.create_default_context())
                if cfg.smtp_username and cfg.smtp_password:
                    server.login(cfg.smtp_username, cfg.smtp_password)
                server.sendmail(cfg.sender, message.to_address, mime_msg.as_string())

            logger.info("Email '%s' sent to %s", message.subject, message.to_address)
            return True

        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed: %s", e)
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", message.to_address, e)
            return False

    def send_code_email(self, to_address: str, name: str, code: str, *, purpose: str) -> bool:
        """Send a one-time code (account verification or password recovery)."""
        subjects = {
            "verification": "Verify your Healthy Habits account",
            "recovery": "Your Healthy Habits password recovery code",
        }
        subject = subjects.get(purpose, "Your Healthy Habits code")
        text = f"Hello {name},\n\nYour code is: {code}\n\nIf you did not request it, ignore this message.\n"
        body_html = (
            f"<p>Hello {html.escape(name)},</p>"
            f"<p>Your code is: <strong>{html.escape(code)}</strong></p>"
            "<p>If you did not request it, ignore this message.</p>"
        )
        return self.send(EmailMessage(to_address, subject, text, body_html))

    def send_notice_email(self, to_address: str, name: str, subject: str, notice: str) -> bool:
        """Send an informational notice about a change to the account."""
        text = f"Hello {name},\n\n{notice}\n"
        body_html = f"<p>Hello {html.escape(name)},</p><p>{html.escape(notice)}</p>"
        return self.send(EmailMessage(to_address, subject, text, body_html))
