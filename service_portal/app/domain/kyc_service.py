"""
KYC operations and the aggregated onboarding flow status.
"""

from typing import Any, Dict, List, Optional

from shared.errors import UpstreamError
from shared.logging import get_logger

from ..adapters.gnosispay_client import GnosisPayClient


class GnosisPayKycService:
    """KYC helpers built on the card platform client."""

    def __init__(self, client: GnosisPayClient):
        self.client = client
        self.logger = get_logger("portal.kyc_service")

    async def get_kyc_questions(self, token: str) -> List[Dict[str, Any]]:
        return await self.client.get_kyc_questions(token)

    async def submit_kyc_answers(self, token: str, answers: List[Dict[str, str]]) -> None:
        await self.client.submit_kyc_answers(token, answers)

    async def get_kyc_access_token(self, token: str, lang: Optional[str] = None) -> str:
        """Token used by the frontend to start the identity-verification SDK."""
        response = await self.client.get_kyc_access_token(token, lang)
        return response["token"]

    async def get_kyc_status(self, token: str) -> str:
        user = await self.client.get_user(token)
        return user.get("kycStatus")

    async def send_phone_verification(self, token: str, phone: str) -> None:
        await self.client.send_phone_verification(token, phone)

    async def verify_phone_otp(self, token: str, otp: str) -> None:
        await self.client.verify_phone_otp(token, otp)

    async def get_kyc_flow_status(self, token: str) -> Dict[str, Any]:
        """Summarize where the user is in onboarding.

        ``hasAccessToken`` is probed by requesting an SDK token. A failure of
        that probe only sets the flag to false; a failure fetching the user
        propagates.
        """
        user = await self.client.get_user(token)

        has_access_token = False
        try:
            await self.client.get_kyc_access_token(token)
            has_access_token = True
        except UpstreamError as e:
            if e.is_transient:
                self.logger.warning(
                    "KYC access token probe failed",
                    status=e.status,
                    error=e.message,
                    transient=True,
                )
            else:
                self.logger.info("KYC access token not entitled", status=e.status, error=e.message)

        return {
            "kycStatus": user.get("kycStatus"),
            "isSourceOfFundsAnswered": user.get("isSourceOfFundsAnswered"),
            "isPhoneValidated": user.get("isPhoneValidated"),
            "hasAccessToken": has_access_token,
        }
