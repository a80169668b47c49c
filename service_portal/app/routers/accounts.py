"""
Account, balance, daily limit, withdrawal and EOA routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..adapters.gnosispay_client import GnosisPayClient
from ..domain.auth_guard import GnosisPayAuthGuard
from ..models import (
    CreateSafeRequest,
    DailyLimitRequest,
    EoaAccountRequest,
    SignatureRequest,
    WithdrawRequest,
)


def build_router(client: GnosisPayClient, guard: GnosisPayAuthGuard) -> APIRouter:
    router = APIRouter(prefix="/api/v1", tags=["GnosisPay - Accounts"])

    # Account and Safe setup

    @router.get("/account/balances")
    async def get_balances(token: str = Depends(guard)):
        return await client.get_account_balance(token)

    @router.get("/account/safe-config")
    async def get_safe_config(token: str = Depends(guard)):
        return await client.get_safe_config(token)

    @router.get("/account/delay-transactions")
    async def get_delay_transactions(token: str = Depends(guard)):
        return await client.get_delay_transactions(token)

    @router.post("/account")
    async def create_safe(request: CreateSafeRequest, token: str = Depends(guard)):
        return await client.create_safe(token, request.chainId)

    @router.get("/account/signature-payload")
    async def get_signature_payload(token: str = Depends(guard)):
        return await client.get_signature_payload(token)

    @router.patch("/account/deploy-safe-modules")
    async def deploy_safe_modules(request: SignatureRequest, token: str = Depends(guard)):
        return await client.deploy_safe_modules(token, request.signature)

    @router.get("/delay-relay")
    async def get_delay_relay(token: str = Depends(guard)):
        return await client.get_delay_transactions(token)

    # Daily limit and withdrawals

    @router.get("/accounts/daily-limit")
    async def get_daily_limit(token: str = Depends(guard)):
        return await client.get_daily_limit(token)

    @router.put("/accounts/daily-limit")
    async def set_daily_limit(request: DailyLimitRequest, token: str = Depends(guard)):
        return await client.set_daily_limit(token, request.newLimit, request.signature)

    @router.get("/accounts/daily-limit/transaction-data")
    async def get_daily_limit_transaction_data(
        newLimit: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        return await client.get_daily_limit_transaction_data(token, newLimit)

    @router.get("/accounts/onchain-daily-limit", deprecated=True)
    async def get_onchain_daily_limit(token: str = Depends(guard)):
        return await client.get_daily_limit(token)

    @router.put("/accounts/onchain-daily-limit", deprecated=True)
    async def set_onchain_daily_limit(request: DailyLimitRequest, token: str = Depends(guard)):
        return await client.set_daily_limit(token, request.newLimit, request.signature)

    @router.get("/accounts/onchain-daily-limit/transaction-data", deprecated=True)
    async def get_onchain_daily_limit_transaction_data(
        newLimit: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        return await client.get_daily_limit_transaction_data(token, newLimit)

    @router.post("/accounts/withdraw")
    async def withdraw(request: WithdrawRequest, token: str = Depends(guard)):
        return await client.withdraw_from_safe(
            token, request.tokenAddress, request.to, request.amount, request.signature
        )

    @router.get("/accounts/withdraw/transaction-data")
    async def get_withdraw_transaction_data(
        tokenAddress: Optional[str] = Query(None),
        to: Optional[str] = Query(None),
        amount: Optional[str] = Query(None),
        token: str = Depends(guard),
    ):
        return await client.get_withdraw_transaction_data(token, tokenAddress, to, amount)

    # EOA accounts

    @router.get("/eoa-accounts")
    async def get_eoa_accounts(token: str = Depends(guard)):
        return await client.get_eoa_accounts(token)

    @router.post("/eoa-accounts")
    async def add_eoa_account(request: EoaAccountRequest, token: str = Depends(guard)):
        return await client.add_eoa_account(token, request.address, request.message, request.signature)

    @router.delete("/eoa-accounts/{account_id}")
    async def remove_eoa_account(account_id: str, token: str = Depends(guard)):
        await client.remove_eoa_account(token, account_id)

    return router
