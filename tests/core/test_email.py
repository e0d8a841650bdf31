"""
Unit tests for email delivery and notifier selection.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from regdesk.core.config import Settings
from regdesk.core.email import (
    LoggingNotifier,
    ResendNotifier,
    SmtpNotifier,
    build_notifier,
)


def _settings(**overrides) -> Settings:
    values = {
        "email_backend": "auto",
        "resend_api_key": None,
        "smtp_host": None,
        "smtp_username": None,
        "smtp_password": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestBuildNotifier:
    """Tests for build_notifier."""

    def test_auto_without_transport_logs(self):
        assert isinstance(build_notifier(_settings()), LoggingNotifier)

    def test_auto_prefers_resend(self):
        notifier = build_notifier(
            _settings(
                resend_api_key="re_test",
                smtp_host="smtp.example.com",
                smtp_username="user",
                smtp_password="pass",
            )
        )
        assert isinstance(notifier, ResendNotifier)

    def test_auto_uses_smtp_when_configured(self):
        notifier = build_notifier(
            _settings(smtp_host="smtp.example.com", smtp_username="user", smtp_password="pass")
        )
        assert isinstance(notifier, SmtpNotifier)
        assert notifier.host == "smtp.example.com"
        assert notifier.port == 587

    def test_explicit_smtp_ignores_resend_key(self):
        notifier = build_notifier(
            _settings(
                email_backend="smtp",
                resend_api_key="re_test",
                smtp_host="smtp.example.com",
                smtp_username="user",
                smtp_password="pass",
            )
        )
        assert isinstance(notifier, SmtpNotifier)

    def test_smtp_without_credentials_logs(self):
        notifier = build_notifier(_settings(email_backend="smtp", smtp_host="smtp.example.com"))
        assert isinstance(notifier, LoggingNotifier)

    @pytest.mark.parametrize(
        "host", ["SMTP_HOST=smtp.example.com", "smtp.example.com smtp.other.com"]
    )
    def test_malformed_smtp_host_rejected(self, host):
        notifier = build_notifier(
            _settings(email_backend="smtp", smtp_host=host, smtp_username="u", smtp_password="p")
        )
        assert isinstance(notifier, LoggingNotifier)

    def test_log_backend(self):
        notifier = build_notifier(_settings(email_backend="log", resend_api_key="re_test"))
        assert isinstance(notifier, LoggingNotifier)

    def test_unknown_backend_logs(self):
        assert isinstance(build_notifier(_settings(email_backend="carrier-pigeon")), LoggingNotifier)


class TestLoggingNotifier:
    @pytest.mark.asyncio
    async def test_reports_success(self):
        assert await LoggingNotifier().send("a@example.com", "Hi", "Body") is True


class TestResendNotifier:
    """Tests for ResendNotifier."""

    @pytest.mark.asyncio
    async def test_send_success(self):
        notifier = ResendNotifier("re_test", "Registrations <noreply@example.com>")

        with patch("regdesk.core.email.resend.Emails.send", return_value={"id": "em_1"}) as send:
            result = await notifier.send("ann@example.com", "Subject", "Body text")

        assert result is True
        params = send.call_args.args[0]
        assert params["to"] == ["ann@example.com"]
        assert params["subject"] == "Subject"
        assert params["text"] == "Body text"
        assert params["from"] == "Registrations <noreply@example.com>"

    @pytest.mark.asyncio
    async def test_send_failure_returns_false(self):
        notifier = ResendNotifier("re_test", "noreply@example.com")

        with patch(
            "regdesk.core.email.resend.Emails.send", side_effect=RuntimeError("API down")
        ):
            result = await notifier.send("ann@example.com", "Subject", "Body")

        assert result is False


class TestSmtpNotifier:
    """Tests for SmtpNotifier."""

    @pytest.mark.asyncio
    async def test_starttls_delivery(self):
        notifier = SmtpNotifier("smtp.example.com", 587, "user", "pass", "noreply@example.com")
        client = MagicMock()

        with patch("regdesk.core.email.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = client
            result = await notifier.send("ann@example.com", "Subject", "Body")

        assert result is True
        smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=30.0)
        client.starttls.assert_called_once()
        client.login.assert_called_once_with("user", "pass")
        message = client.send_message.call_args.args[0]
        assert message["To"] == "ann@example.com"
        assert message["Subject"] == "Subject"
        assert message.get_content().strip() == "Body"

    @pytest.mark.asyncio
    async def test_implicit_tls_on_465(self):
        notifier = SmtpNotifier("smtp.example.com", 465, "user", "pass", "noreply@example.com")

        with (
            patch("regdesk.core.email.smtplib.SMTP_SSL") as ssl_cls,
            patch("regdesk.core.email.smtplib.SMTP") as smtp_cls,
        ):
            result = await notifier.send("ann@example.com", "Subject", "Body")

        assert result is True
        ssl_cls.assert_called_once()
        smtp_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_smtp_failure_returns_false(self):
        notifier = SmtpNotifier("smtp.example.com", 587, "user", "pass", "noreply@example.com")

        with patch("regdesk.core.email.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value.login.side_effect = (
                smtplib.SMTPAuthenticationError(535, b"bad credentials")
            )
            result = await notifier.send("ann@example.com", "Subject", "Body")

        assert result is False

    @pytest.mark.asyncio
    async def test_connection_error_returns_false(self):
        notifier = SmtpNotifier("smtp.example.com", 587, "user", "pass", "noreply@example.com")

        with patch("regdesk.core.email.smtplib.SMTP", side_effect=OSError("refused")):
            result = await notifier.send("ann@example.com", "Subject", "Body")

        assert result is False
