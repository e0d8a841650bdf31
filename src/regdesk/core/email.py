"""
Email Delivery

Notifier implementations used by the registration workflow:
- ResendNotifier: Resend HTTP API
- SmtpNotifier: any SMTP relay (implicit TLS on 465, STARTTLS otherwise)
- LoggingNotifier: logs the message instead of sending it

Every notifier reports failure by returning False. None of them raise, so a
broken mail setup can never undo a registration or a status change.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

import resend

from regdesk.core.config import Settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can deliver a plain-text message to one address."""

    async def send(self, to_email: str, subject: str, body: str) -> bool: ...


class LoggingNotifier:
    """Fallback used when no mail transport is configured."""

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True


class ResendNotifier:
    """Send email through the Resend API."""

    def __init__(self, api_key: str, email_from: str):
        resend.api_key = api_key
        self.email_from = email_from

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        """
        Send an email using Resend.

        Args:
            to_email: Recipient email address
            subject: Email subject line
            body: Plain-text body

        Returns:
            True if email was sent successfully
        """
        try:
            params: resend.Emails.SendParams = {
                "from": self.email_from,
                "to": [to_email],
                "subject": subject,
                "text": body,
            }

            # Run sync Resend call in thread pool to avoid blocking event loop
            email = await asyncio.to_thread(resend.Emails.send, params)
            logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
            return True
        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False


class SmtpNotifier:
    """Send email through an authenticated SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        email_from: str,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.email_from = email_from
        self.timeout = timeout

    def _build_message(self, to_email: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.email_from
        message["To"] = to_email
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        if self.port == 465:
            with smtplib.SMTP_SSL(
                self.host, self.port, context=context, timeout=self.timeout
            ) as client:
                client.login(self.username, self.password)
                client.send_message(message)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
                client.starttls(context=context)
                client.login(self.username, self.password)
                client.send_message(message)

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        message = self._build_message(to_email, subject, body)
        try:
            await asyncio.to_thread(self._deliver, message)
            logger.info(f"Email sent successfully to {to_email} via SMTP")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email} via {self.host}: {e}")
            return False


def _smtp_host_is_valid(host: str) -> bool:
    return "=" not in host and " " not in host


def _build_smtp_notifier(settings: Settings) -> SmtpNotifier | None:
    host = (settings.smtp_host or "").strip()
    username = (settings.smtp_username or "").strip()
    password = (settings.smtp_password or "").strip()

    if not host or not username or not password:
        return None

    if not _smtp_host_is_valid(host):
        logger.error(
            f'Invalid SMTP_HOST value "{host}": expected a bare hostname such as '
            "smtp.example.com (no spaces, quotes or duplicated assignments)"
        )
        return None

    return SmtpNotifier(
        host=host,
        port=settings.smtp_port,
        username=username,
        password=password,
        email_from=settings.email_from,
    )


def build_notifier(settings: Settings) -> Notifier:
    """
    Build the notifier selected by EMAIL_BACKEND.

    "auto" prefers Resend when an API key is set, then SMTP when host and
    credentials are set, and logs messages otherwise. A backend that is
    requested explicitly but not fully configured also falls back to logging.
    """
    backend = settings.email_backend.strip().lower()

    if backend not in {"auto", "resend", "smtp", "log"}:
        logger.warning(f"Unknown EMAIL_BACKEND '{backend}' - logging emails instead of sending")
        return LoggingNotifier()

    if backend == "log":
        return LoggingNotifier()

    if backend in {"auto", "resend"} and settings.resend_api_key:
        logger.info("Email backend: Resend")
        return ResendNotifier(settings.resend_api_key, settings.email_from)

    if backend in {"auto", "smtp"}:
        smtp_notifier = _build_smtp_notifier(settings)
        if smtp_notifier is not None:
            logger.info(f"Email backend: SMTP ({smtp_notifier.host}:{smtp_notifier.port})")
            return smtp_notifier

    logger.warning("Email transport not configured - logging emails instead of sending")
    return LoggingNotifier()
