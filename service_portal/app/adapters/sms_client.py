"""
Twilio SMS client for the Portal service.
"""

import asyncio
from typing import Optional

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from shared.errors import ConfigurationError, PortalException
from shared.logging import get_logger


class SmsClient:
    """Sends SMS through Twilio.

    The Twilio REST client is built on first send so a process without SMS
    credentials still starts; sending then fails with a configuration error.
    """

    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_number: Optional[str],
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.logger = get_logger("portal.sms_client")
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        """Lazy initialization of Twilio client."""
        if self._client is None:
            if not self.account_sid or not self.auth_token:
                raise ConfigurationError("Twilio credentials not configured")
            self._client = Client(self.account_sid, self.auth_token)
        return self._client

    async def send(self, to: str, body: str) -> str:
        """Send one message and return the Twilio message SID."""
        client = self.client
        if not self.from_number:
            raise ConfigurationError("TWILIO_PHONE_NUMBER not configured")

        try:
            message = await asyncio.to_thread(
                client.messages.create,
                to=to,
                from_=self.from_number,
                body=body,
            )
        except TwilioRestException as e:
            self.logger.error("Twilio send failed", to=to, status=e.status, error=e.msg)
            raise PortalException(f"SMS delivery failed: {e.msg}", status_code=502) from e

        self.logger.info("SMS sent", to=to, sid=message.sid)
        return message.sid
