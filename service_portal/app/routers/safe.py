"""
Safe wallet routes: currency, transactions, deployment and owners.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import (
    AddOwnerRequest,
    RemoveOwnerRequest,
    SafeTransactionRequest,
    SetCurrencyRequest,
)


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1", tags=["GnosisPay - Safe"])

    @router.post("/safe/set-currency")
    async def set_currency(request: SetCurrencyRequest, token: str = Depends(guard)):
        await client.set_safe_currency(token, request.currency)

    @router.get("/safe/supported-currencies")
    async def get_supported_currencies(token: str = Depends(guard)):
        return await client.get_supported_currencies(token)

    @router.post("/safe/transactions")
    async def create_transaction(request: SafeTransactionRequest, token: str = Depends(guard)):
        return await client.create_safe_transaction(token, request.model_dump(exclude_none=True))

    @router.post("/safe/deploy")
    async def deploy_safe(token: str = Depends(guard)):
        return await client.deploy_safe(token)

    @router.get("/safe/deploy")
    async def get_deployment_status(token: str = Depends(guard)):
        return await client.get_safe_deployment_status(token)

    @router.delete("/safe/reset")
    async def reset_safe(token: str = Depends(guard)):
        await client.reset_safe(token)

    @router.get("/safe/config")
    async def get_config(token: str = Depends(guard)):
        return await client.get_safe_config(token)

    # Owners

    @router.get("/owners")
    async def get_owners(token: str = Depends(guard)):
        return await client.get_safe_owners(token)

    @router.post("/owners")
    async def add_owner(request: AddOwnerRequest, token: str = Depends(guard)):
        return await client.add_safe_owner(token, request.newOwner, request.signature)

    @router.delete("/owners")
    async def remove_owner(request: RemoveOwnerRequest, token: str = Depends(guard)):
        return await client.remove_safe_owner(token, request.ownerToRemove, request.signature)

    @router.get("/owners/add/transaction-data")
    async def get_add_owner_transaction_data(
        newOwner: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        return await client.get_add_owner_transaction_data(token, newOwner)

    @router.get("/owners/remove/transaction-data")
    async def get_remove_owner_transaction_data(
        ownerToRemove: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        return await client.get_remove_owner_transaction_data(token, ownerToRemove)

    return router
