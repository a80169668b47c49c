"""
Card platform user profile routes.
"""

from fastapi import APIRouter, Depends

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..domain.kyc_service import GnosisPayKycService
from ..models import PhoneOtpRequest, PhoneRequest, UpdateUserRequest


def build_router(
    client: GnosisPayClient,
    kyc_service: GnosisPayKycService,
    guard: GnosisPayAuthGuard,
) -> APIRouter:
    router = APIRouter(prefix="/api/v1/user", tags=["GnosisPay - User"])

    @router.get("")
    async def get_user(token: str = Depends(guard)):
        return await client.get_user(token)

    @router.patch("")
    async def update_user(request: UpdateUserRequest, token: str = Depends(guard)):
        return await client.update_user(token, request.model_dump(exclude_none=True))

    @router.post("/phone/send-otp")
    async def send_phone_otp(request: PhoneRequest, token: str = Depends(guard)):
        await kyc_service.send_phone_verification(token, request.phone)

    @router.post("/phone/verify-otp")
    async def verify_phone_otp(request: PhoneOtpRequest, token: str = Depends(guard)):
        await kyc_service.verify_phone_otp(token, request.otp)

    return router
