"""
Unit tests for SMS and email notifications.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest

from service_portal.app.adapters.email_client import EmailClient
from service_portal.app.adapters.sms_client import SmsClient
from service_portal.app.notifications.service import NotificationService, OtpPurpose
from service_portal.app.notifications.templates import get_template, render_email, template_names
from shared.errors import ConfigurationError, PortalException, ValidationError


class TestNotificationService:
    """Test cases for NotificationService."""

    @pytest.fixture
    def sms_client(self):
        client = MagicMock()
        client.send = AsyncMock(return_value="SM123")
        return client

    @pytest.fixture
    def email_client(self):
        client = MagicMock()
        client.send = AsyncMock(return_value="<abc@portalfi.com>")
        return client

    @pytest.fixture
    def metrics(self):
        return MagicMock()

    @pytest.fixture
    def service(self, sms_client, email_client, metrics):
        return NotificationService(
            sms_client,
            email_client,
            app_name="Portalfi",
            otp_expiry_minutes=10,
            cta_url="https://portalfi.com",
            metrics=metrics,
        )

    def test_otp_message_is_localized(self, service):
        message = service.build_otp_message("123456", OtpPurpose.LOGIN, "en")
        assert message.startswith("Portalfi: use 123456 to sign in.")
        assert "10 minutes" in message

    def test_otp_message_falls_back_to_english(self, service):
        assert service.build_otp_message("9", OtpPurpose.GENERIC, "fr") == service.build_otp_message(
            "9", OtpPurpose.GENERIC, "en"
        )

    @pytest.mark.asyncio
    async def test_send_otp_sms(self, service, sms_client, metrics):
        sid = await service.send_otp_sms("+351912345678", "123456", OtpPurpose.REGISTRATION, "es")

        assert sid == "SM123"
        to, body = sms_client.send.call_args.args
        assert to == "+351912345678"
        assert "123456" in body
        metrics.record_notification.assert_called_once_with("sms", "sent")

    @pytest.mark.asyncio
    async def test_sms_failure_is_recorded(self, service, sms_client, metrics):
        sms_client.send.side_effect = ConfigurationError("Twilio credentials not configured")

        with pytest.raises(ConfigurationError):
            await service.send_test_sms("+351912345678", "hello")

        metrics.record_notification.assert_called_once_with("sms", "error")

    @pytest.mark.asyncio
    async def test_send_template_email_renders_params(self, service, email_client):
        message_id = await service.send_template_email(
            "user@example.com",
            "loginVerification",
            "en",
            {"name": "Ana", "code": "482913", "minutes": 5},
        )

        assert message_id == "<abc@portalfi.com>"
        to, subject, html, text = email_client.send.call_args.args
        assert to == "user@example.com"
        assert subject
        assert "482913" in html
        assert "Ana" in text

    @pytest.mark.asyncio
    async def test_code_expiry_defaults_to_configured_minutes(self, service, email_client):
        await service.send_template_email("user@example.com", "loginVerification", "en", {"code": "123456"})

        _, _, html, text = email_client.send.call_args.args
        assert "This code expires in 10 minutes." in text
        assert "expires in  minutes" not in html

    @pytest.mark.asyncio
    async def test_unknown_template_is_rejected(self, service, email_client):
        with pytest.raises(ValidationError) as exc_info:
            await service.send_template_email("user@example.com", "nope", "en", {})

        assert exc_info.value.message == "Unknown email template: nope"
        email_client.send.assert_not_awaited()

    def test_preview_falls_back_to_welcome(self, service):
        assert service.preview_email("Daniel", "en", "nope") == service.preview_email("Daniel", "en", "welcome")


class TestEmailTemplates:
    """Test cases for template rendering."""

    def test_every_template_renders_in_every_language(self):
        for name in template_names():
            for language in ("en", "es", "pt-PT"):
                rendered = render_email(get_template(name), "Daniel", language, use_sample=True)
                assert rendered.subject != f"{name}.subject"
                assert "{{" not in rendered.html

    def test_name_is_escaped(self):
        rendered = render_email(get_template("welcome"), "<b>Eve</b>", "en")
        assert "&lt;b&gt;Eve&lt;/b&gt;" in rendered.html
        assert "<b>Eve</b>" not in rendered.html

    def test_rows_without_values_are_skipped(self):
        rendered = render_email(get_template("newDeviceDetected"), "Ana", "en", {"device": "Pixel 8"})
        assert "Pixel 8" in rendered.text
        assert "Location" not in rendered.text

    def test_language_is_resolved(self):
        assert render_email(get_template("welcome"), "Ana", "es-AR").language == "es"


class TestSmsClient:
    """Test cases for the Twilio client wrapper."""

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        client = SmsClient(None, None, "+15550000000")

        with pytest.raises(ConfigurationError) as exc_info:
            await client.send("+351912345678", "hi")

        assert exc_info.value.message == "Twilio credentials not configured"

    @pytest.mark.asyncio
    async def test_send_returns_sid(self):
        with patch("service_portal.app.adapters.sms_client.Client") as mock_twilio:
            mock_twilio.return_value.messages.create.return_value = MagicMock(sid="SM999")
            client = SmsClient("AC123", "secret", "+15550000000")

            sid = await client.send("+351912345678", "hi")

            assert sid == "SM999"
            mock_twilio.assert_called_once_with("AC123", "secret")
            mock_twilio.return_value.messages.create.assert_called_once_with(
                to="+351912345678", from_="+15550000000", body="hi"
            )


class TestEmailClient:
    """Test cases for the SMTP client wrapper."""

    @pytest.mark.asyncio
    async def test_missing_host(self):
        client = EmailClient(None)

        with pytest.raises(ConfigurationError):
            await client.send("user@example.com", "Hi", "<p>Hi</p>")

    @pytest.mark.asyncio
    async def test_send_uses_implicit_tls_when_secure(self):
        with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = ({}, "250 OK")
            client = EmailClient(
                "smtp.example.com", port=465, secure=True,
                username="mailer@portalfi.com", password="pw",
            )

            message_id = await client.send("user@example.com", "Hi", "<p>Hi</p>", "Hi")

            assert message_id.endswith("@portalfi.com>")
            message = mock_send.call_args.args[0]
            assert message["To"] == "user@example.com"
            assert message["From"] == "mailer@portalfi.com"
            kwargs = mock_send.call_args.kwargs
            assert kwargs["hostname"] == "smtp.example.com"
            assert kwargs["port"] == 465
            assert kwargs["use_tls"] is True

    @pytest.mark.asyncio
    async def test_smtp_failure_maps_to_502(self):
        with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            mock_send.side_effect = aiosmtplib.SMTPException("connection lost")
            client = EmailClient("smtp.example.com")

            with pytest.raises(PortalException) as exc_info:
                await client.send("user@example.com", "Hi", "<p>Hi</p>")

            assert exc_info.value.status_code == 502
