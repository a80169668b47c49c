"""
SMTP email client for the Portal service.
"""

from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

import aiosmtplib

from shared.errors import ConfigurationError, PortalException
from shared.logging import get_logger


class EmailClient:
    """Sends HTML email over SMTP with aiosmtplib."""

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        secure: bool = False,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_address: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.secure = secure
        self.username = username
        self.password = password
        self.from_address = from_address or username
        self.logger = get_logger("portal.email_client")

    def build_message(self, to: str, subject: str, html: str, text: Optional[str] = None) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.from_address or ""
        message["To"] = to
        message["Message-ID"] = make_msgid(domain=(self.from_address or "localhost").split("@")[-1])
        message.set_content(text or subject)
        message.add_alternative(html, subtype="html")
        return message

    async def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> str:
        """Send one message and return its Message-ID."""
        if not self.host:
            raise ConfigurationError("SMTP_HOST not configured")

        message = self.build_message(to, subject, html, text)
        try:
            # secure means implicit TLS (port 465); otherwise STARTTLS is negotiated when offered
            _, response = await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.secure,
            )
        except aiosmtplib.SMTPException as e:
            self.logger.error("SMTP send failed", to=to, error=str(e))
            raise PortalException(f"Email delivery failed: {e}", status_code=502) from e

        message_id = message["Message-ID"]
        self.logger.info("Email sent", to=to, message_id=message_id, smtp_response=response)
        return message_id
