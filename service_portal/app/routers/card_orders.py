"""
Physical card order routes.
"""

from fastapi import APIRouter, Depends

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import (
    AttachTransactionRequest,
    CardOrderStatus,
    ConfirmCardOrderRequest,
    CouponRequest,
    CreatePhysicalCardOrderRequest,
)


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1/card-orders", tags=["GnosisPay - Card Orders"])

    @router.get(
        "",
        description="Order status is one of: " + ", ".join(status.value for status in CardOrderStatus),
    )
    async def get_card_orders(token: str = Depends(guard)):
        return await client.get_card_orders(token)

    @router.post("/physical")
    async def create_physical_card_order(
        request: CreatePhysicalCardOrderRequest,
        token: str = Depends(guard),
    ):
        return await client.create_physical_card_order(token, request.model_dump(mode="json", exclude_none=True))

    @router.get("/{orderId}")
    async def get_card_order(orderId: str, token: str = Depends(guard)):
        return await client.get_card_order(token, orderId)

    @router.patch("/{orderId}/cancel")
    async def cancel_card_order(orderId: str, token: str = Depends(guard)):
        await client.cancel_card_order(token, orderId)

    @router.post("/{orderId}/confirm")
    async def confirm_card_order(
        orderId: str,
        request: ConfirmCardOrderRequest,
        token: str = Depends(guard),
    ):
        await client.confirm_card_order_payment(token, orderId)

    @router.post("/{orderId}/create-card")
    async def create_physical_card(orderId: str, token: str = Depends(guard)):
        return await client.create_physical_card(token, orderId)

    @router.post("/{orderId}/attach-coupon")
    async def attach_coupon(orderId: str, request: CouponRequest, token: str = Depends(guard)):
        return await client.attach_coupon_to_order(token, orderId, request.couponCode)

    @router.post("/{orderId}/attach-transaction")
    async def attach_transaction(
        orderId: str,
        request: AttachTransactionRequest,
        token: str = Depends(guard),
    ):
        return await client.attach_transaction_to_order(token, orderId, request.transactionHash)

    return router
