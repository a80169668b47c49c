"""
Rewards, cashback and terms routes.
"""

from fastapi import APIRouter, Depends

from shared.errors import ValidationError

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import AcceptRewardsTermsRequest, AcceptTermsRequest


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1", tags=["GnosisPay - Rewards"])

    @router.get("/rewards")
    async def get_rewards(token: str = Depends(guard)):
        return await client.get_rewards(token)

    @router.post("/rewards/accept-terms")
    async def accept_rewards_terms(request: AcceptRewardsTermsRequest, token: str = Depends(guard)):
        if not request.accepted:
            raise ValidationError("Terms must be accepted")
        await client.accept_rewards_terms(token, request.version)

    @router.get("/cashback")
    async def get_cashback(token: str = Depends(guard)):
        return await client.get_cashback(token)

    @router.get("/user/terms")
    async def get_user_terms(token: str = Depends(guard)):
        return await client.get_user_terms(token)

    @router.post("/user/terms")
    async def accept_user_terms(request: AcceptTermsRequest, token: str = Depends(guard)):
        await client.accept_user_terms(token, request.type, request.version)

    return router
