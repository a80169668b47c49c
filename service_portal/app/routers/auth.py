"""
Card platform authentication routes (SIWE challenge and signup).
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..domain.auth_service import GnosisPayAuthService
from ..models import SignupOtpRequest, SignupRequest, VerifyChallengeRequest


def build_router(
    client: GnosisPayClient,
    auth_service: GnosisPayAuthService,
    guard: GnosisPayAuthGuard,
) -> APIRouter:
    router = APIRouter(prefix="/api/v1/auth", tags=["GnosisPay - Authentication"])

    @router.get("/nonce", response_class=PlainTextResponse)
    async def get_nonce():
        """Nonce to embed in the SIWE message (public)."""
        nonce = await client.generate_nonce()
        return PlainTextResponse(str(nonce))

    @router.post("/challenge")
    async def verify_challenge(request: VerifyChallengeRequest) -> Dict[str, Any]:
        """Exchange a signed SIWE message for a bearer token (public)."""
        response = await client.verify_challenge(
            request.message,
            request.signature,
            request.ttlInSeconds,
        )
        return {"token": response.get("token") if isinstance(response, dict) else None}

    @router.post("/signup")
    async def signup(request: SignupRequest, token: str = Depends(guard)):
        return await auth_service.signup_user(
            token,
            request.authEmail,
            request.otp,
            request.referralCouponCode,
            request.marketingCampaign,
            request.partnerId,
        )

    @router.post("/signup/otp")
    async def request_signup_otp(request: SignupOtpRequest):
        """Send a signup OTP to the email address (public)."""
        await client.request_signup_otp(request.email)

    return router
