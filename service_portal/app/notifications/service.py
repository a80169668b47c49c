"""
Notification service: localized OTP / test SMS and templated email.
"""

from enum import Enum
from typing import Any, Dict, Optional

from shared.errors import PortalException, ValidationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from ..adapters.email_client import EmailClient
from ..adapters.sms_client import SmsClient
from .i18n import SMS_NAMESPACE, Translator
from .templates import DEFAULT_TEMPLATE, RenderedEmail, get_template, render_email


class OtpPurpose(str, Enum):
    GENERIC = "generic"
    LOGIN = "login"
    REGISTRATION = "registration"
    PASSWORD_RESET = "password_reset"


class NotificationService:
    """Builds message bodies from the catalogues and hands them to the SMS/SMTP clients."""

    def __init__(
        self,
        sms_client: SmsClient,
        email_client: EmailClient,
        app_name: str = "Portalfi",
        otp_expiry_minutes: int = 10,
        cta_url: str = "https://portalfi.com",
        metrics: Optional[MetricsCollector] = None,
    ):
        self.sms_client = sms_client
        self.email_client = email_client
        self.app_name = app_name
        self.otp_expiry_minutes = otp_expiry_minutes
        self.cta_url = cta_url
        self.metrics = metrics
        self.logger = get_logger("portal.notifications")

    def _record(self, channel: str, status: str):
        if self.metrics:
            self.metrics.record_notification(channel, status)

    async def _send_sms(self, to: str, body: str) -> str:
        try:
            sid = await self.sms_client.send(to, body)
        except PortalException:
            self._record("sms", "error")
            raise
        self._record("sms", "sent")
        return sid

    async def _send_email(self, to: str, rendered: RenderedEmail) -> str:
        try:
            message_id = await self.email_client.send(to, rendered.subject, rendered.html, rendered.text)
        except PortalException:
            self._record("email", "error")
            raise
        self._record("email", "sent")
        self.logger.info(
            "Email dispatched",
            template=rendered.template,
            language=rendered.language,
            to=to,
        )
        return message_id

    # SMS

    def build_otp_message(
        self,
        code: str,
        purpose: OtpPurpose = OtpPurpose.GENERIC,
        language: Optional[str] = None,
    ) -> str:
        translator = Translator(SMS_NAMESPACE, language)
        return translator.t(
            f"otp.{OtpPurpose(purpose).value}",
            appName=self.app_name,
            code=code,
            minutes=self.otp_expiry_minutes,
        )

    async def send_test_sms(self, to: str, message: str) -> str:
        return await self._send_sms(to, message)

    async def send_otp_sms(
        self,
        to: str,
        code: str,
        purpose: OtpPurpose = OtpPurpose.GENERIC,
        language: Optional[str] = None,
    ) -> str:
        body = self.build_otp_message(code, purpose, language)
        self.logger.info("Sending OTP SMS", to=to, purpose=OtpPurpose(purpose).value)
        return await self._send_sms(to, body)

    # Email

    def preview_email(self, name: str, language: Optional[str] = None, template: Optional[str] = None) -> str:
        """Render a template with sample values; unknown names fall back to the welcome email."""
        selected = get_template(template) or get_template(DEFAULT_TEMPLATE)
        return render_email(selected, name, language, cta_url=self.cta_url, use_sample=True).html

    async def send_welcome_email(self, to: str, name: str, language: Optional[str] = None) -> str:
        rendered = render_email(get_template(DEFAULT_TEMPLATE), name, language, cta_url=self.cta_url)
        return await self._send_email(to, rendered)

    async def send_template_email(
        self,
        to: str,
        template: str,
        language: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> str:
        selected = get_template(template)
        if selected is None:
            raise ValidationError(f"Unknown email template: {template}")

        values = dict(params or {})
        name = str(values.pop("name", "") or "")
        if values.get("minutes") in (None, ""):
            values["minutes"] = self.otp_expiry_minutes
        rendered = render_email(selected, name, language, values, cta_url=self.cta_url)
        return await self._send_email(to, rendered)
