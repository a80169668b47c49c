"""
Transaction history and dispute routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import DisputeRequest, EventKind, TransactionStatus


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1/transactions", tags=["GnosisPay - Transactions"])

    @router.get(
        "",
        description=(
            "Events are tagged by kind ("
            + ", ".join(kind.value for kind in EventKind)
            + "); status is one of: "
            + ", ".join(status.value for status in TransactionStatus)
        ),
    )
    async def get_transactions(
        cardId: Optional[str] = Query(None),
        startDate: Optional[str] = Query(None),
        endDate: Optional[str] = Query(None),
        type: Optional[str] = Query(None),
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1, le=100),
        token: str = Depends(guard),
    ):
        params = {
            "cardId": cardId,
            "startDate": startDate,
            "endDate": endDate,
            "type": type,
            "page": page,
            "limit": limit,
        }
        return await client.get_transactions(token, params)

    @router.get("/dispute/reasons")
    async def get_dispute_reasons(token: str = Depends(guard)):
        return await client.get_dispute_reasons(token)

    @router.get("/{transactionId}")
    async def get_transaction(transactionId: str, token: str = Depends(guard)):
        return await client.get_transaction(token, transactionId)

    @router.post("/{threadId}/dispute")
    async def dispute_transaction(threadId: str, request: DisputeRequest, token: str = Depends(guard)):
        return await client.dispute_transaction(token, threadId, request.reason, request.description)

    return router
