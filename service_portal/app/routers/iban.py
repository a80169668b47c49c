"""
IBAN (Monerium) routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import CallbackUrlRequest, MoneriumIntegrationRequest


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1", tags=["GnosisPay - IBAN"])

    @router.get("/ibans/available")
    async def get_availability(token: str = Depends(guard)):
        return await client.get_iban_availability(token)

    @router.get("/ibans/details")
    async def get_details(token: str = Depends(guard)):
        return await client.get_iban_details(token)

    @router.get("/ibans/orders")
    async def get_orders(token: str = Depends(guard)):
        return await client.get_iban_orders(token)

    @router.get("/ibans/signing-message")
    async def get_signing_message(token: str = Depends(guard)):
        return await client.get_iban_signing_message(token)

    @router.get("/ibans/oauth/redirect_url")
    async def get_oauth_redirect_url(
        callbackUrl: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        return await client.get_iban_oauth_redirect_url(token, callbackUrl)

    @router.post("/ibans/monerium-profile")
    async def create_monerium_profile(request: CallbackUrlRequest, token: str = Depends(guard)):
        return await client.create_monerium_profile(token, request.callbackUrl)

    @router.delete("/ibans/reset")
    async def reset_iban(token: str = Depends(guard)):
        await client.reset_iban(token)

    @router.post("/integrations/monerium")
    async def create_monerium_integration(
        request: MoneriumIntegrationRequest,
        token: str = Depends(guard),
    ):
        return await client.create_monerium_integration(token, request.signature, request.accounts)

    return router
