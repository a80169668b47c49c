"""
Card routes.

``/transactions`` is registered before ``/{cardId}`` so it is not captured as
a card id.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..domain.auth_guard import GnosisPayAuthGuard
from ..domain.card_service import GnosisPayCardService


def build_router(card_service: GnosisPayCardService, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1/cards", tags=["GnosisPay - Cards"])
    client = card_service.client

    @router.get("")
    async def get_cards(token: str = Depends(guard)):
        return await card_service.get_cards(token)

    @router.post("/virtual")
    async def create_virtual_card(token: str = Depends(guard)):
        return await card_service.create_virtual_card(token)

    @router.get("/transactions")
    async def get_card_transactions(
        cardTokens: Optional[str] = Query(None, description="Comma separated card tokens"),
        limit: Optional[int] = Query(None),
        offset: Optional[int] = Query(None),
        before: Optional[str] = Query(None),
        after: Optional[str] = Query(None),
        billingCurrency: Optional[str] = Query(None),
        transactionCurrency: Optional[str] = Query(None),
        mcc: Optional[str] = Query(None),
        transactionType: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        card_tokens = [item.strip() for item in cardTokens.split(",") if item.strip()] if cardTokens else None
        return await client.get_card_transactions(
            token,
            card_tokens=card_tokens,
            limit=limit,
            offset=offset,
            before=before,
            after=after,
            billing_currency=billingCurrency,
            transaction_currency=transactionCurrency,
            mcc=mcc,
            transaction_type=transactionType,
        )

    @router.get("/{cardId}")
    async def get_card(cardId: str, token: str = Depends(guard)):
        return await card_service.get_card_by_id(token, cardId)

    @router.get("/{cardId}/status")
    async def get_card_status(cardId: str, token: str = Depends(guard)):
        return await card_service.get_card_status(token, cardId)

    @router.get("/{cardId}/transactions")
    async def get_transactions_for_card(cardId: str, token: str = Depends(guard)):
        return await card_service.get_card_transactions(token, cardId)

    @router.post("/{cardId}/activate")
    async def activate_card(cardId: str, token: str = Depends(guard)):
        await card_service.activate_card(token, cardId)

    @router.post("/{cardId}/freeze")
    async def freeze_card(cardId: str, token: str = Depends(guard)):
        await card_service.freeze_card(token, cardId)

    @router.post("/{cardId}/unfreeze")
    async def unfreeze_card(cardId: str, token: str = Depends(guard)):
        await card_service.unfreeze_card(token, cardId)

    @router.post("/{cardId}/report-lost")
    async def report_lost(cardId: str, token: str = Depends(guard)):
        await card_service.report_card_lost(token, cardId)

    @router.post("/{cardId}/stolen")
    async def report_stolen(cardId: str, token: str = Depends(guard)):
        await card_service.report_card_stolen(token, cardId)

    @router.post("/{cardId}/void")
    async def void_card(cardId: str, token: str = Depends(guard)):
        await card_service.void_card(token, cardId)

    return router
