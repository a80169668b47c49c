"""
Webhook management routes.
"""

from fastapi import APIRouter, Depends

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import CreateWebhookRequest, SubscribeWebhookRequest, UpdateWebhookRequest


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1/webhooks", tags=["GnosisPay - Webhooks"])

    @router.get("")
    async def list_webhooks(token: str = Depends(guard)):
        return await client.get_webhooks(token)

    @router.post("")
    async def create_webhook(request: CreateWebhookRequest, token: str = Depends(guard)):
        return await client.create_webhook(token, request.model_dump(exclude_none=True))

    @router.get("/message/{partnerId}")
    async def get_webhook_message(partnerId: str, token: str = Depends(guard)):
        return await client.get_webhook_message(token, partnerId)

    @router.post("/subscribe/{partnerId}")
    async def subscribe(partnerId: str, request: SubscribeWebhookRequest, token: str = Depends(guard)):
        return await client.subscribe_webhook(token, partnerId, request.url, request.signature, request.events)

    @router.get("/{webhookId}")
    async def get_webhook(webhookId: str, token: str = Depends(guard)):
        return await client.get_webhook(token, webhookId)

    @router.patch("/{webhookId}")
    async def update_webhook(webhookId: str, request: UpdateWebhookRequest, token: str = Depends(guard)):
        return await client.update_webhook(token, webhookId, request.model_dump(exclude_none=True))

    @router.delete("/{webhookId}")
    async def delete_webhook(webhookId: str, token: str = Depends(guard)):
        await client.delete_webhook(token, webhookId)

    return router
