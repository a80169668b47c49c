"""
Card platform (Gnosis Pay) client for the Portal service.

Every public coroutine is a thin wrapper over one upstream endpoint: it builds the
path, query and body, attaches the caller's bearer token to that single request
and returns the decoded response body unchanged. Failures of any kind are
normalized into ``UpstreamError(message, status)`` in ``_request``.
"""

import time
from typing import Any, Dict, List, Optional

import httpx

from shared.errors import UpstreamError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

DEFAULT_BASE_URL = "https://api.gnosispay.com"


class GnosisPayClient:
    """Client for communicating with the card platform REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.metrics = metrics
        self.default_headers = {"Content-Type": "application/json"}
        self.logger = get_logger("portal.gnosispay_client")

    @staticmethod
    def _auth_headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _compact(values: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Drop unset entries so they are never sent upstream."""
        if values is None:
            return None
        return {key: value for key, value in values.items() if value is not None}

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _normalize_error(exc: httpx.HTTPError) -> UpstreamError:
        """Map a transport or HTTP failure to (message, status)."""
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            message = f"Request failed with status code {status}"
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            return UpstreamError(message, status)

        return UpstreamError(str(exc) or exc.__class__.__name__, 500)

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        headers = self._auth_headers(token) if token is not None else None
        query = self._compact(params)
        body = self._compact(json) if isinstance(json, dict) else json

        start_time = time.time()
        status = 0
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=query,
                    json=body,
                    headers=headers,
                )
                status = response.status_code
                response.raise_for_status()
                return self._decode(response)

        except httpx.HTTPError as e:
            error = self._normalize_error(e)
            status = error.status
            self.logger.warning(
                "Upstream request failed",
                operation=operation,
                method=method,
                path=path,
                status=error.status,
                error=error.message,
            )
            raise error from e

        finally:
            duration = time.time() - start_time
            if self.metrics:
                self.metrics.record_upstream_call(operation, status or 500, duration)
            self.logger.info(
                "Upstream request",
                operation=operation,
                method=method,
                path=path,
                status=status,
                duration_ms=round(duration * 1000, 2),
            )

    # Authentication

    async def generate_nonce(self) -> str:
        return await self._request("generate_nonce", "GET", "/api/v1/auth/nonce")

    async def verify_challenge(
        self,
        message: str,
        signature: str,
        ttl_in_seconds: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Exchange a signed SIWE message for an upstream bearer token."""
        return await self._request(
            "verify_challenge",
            "POST",
            "/api/v1/auth/challenge",
            json={"message": message, "signature": signature, "ttlInSeconds": ttl_in_seconds},
        )

    async def signup(
        self,
        token: str,
        auth_email: str,
        otp: Optional[str] = None,
        referral_coupon_code: Optional[str] = None,
        marketing_campaign: Optional[str] = None,
        partner_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "signup",
            "POST",
            "/api/v1/auth/signup",
            token,
            json={
                "authEmail": auth_email,
                "otp": otp,
                "referralCouponCode": referral_coupon_code,
                "marketingCampaign": marketing_campaign,
                "partnerId": partner_id,
            },
        )

    async def request_signup_otp(self, email: str) -> None:
        await self._request("request_signup_otp", "POST", "/api/v1/auth/signup/otp", json={"email": email})

    # User

    async def get_user(self, token: str) -> Dict[str, Any]:
        return await self._request("get_user", "GET", "/api/v1/user", token)

    async def update_user(self, token: str, user_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("update_user", "PATCH", "/api/v1/user", token, json=user_data)

    async def send_phone_verification(self, token: str, phone: str) -> None:
        await self._request(
            "send_phone_verification", "POST", "/api/v1/user/phone/send-otp", token, json={"phone": phone}
        )

    async def verify_phone_otp(self, token: str, otp: str) -> None:
        await self._request(
            "verify_phone_otp", "POST", "/api/v1/user/phone/verify-otp", token, json={"otp": otp}
        )

    async def get_user_terms(self, token: str) -> Any:
        return await self._request("get_user_terms", "GET", "/api/v1/user/terms", token)

    async def accept_user_terms(self, token: str, terms_type: str, version: str) -> None:
        await self._request(
            "accept_user_terms",
            "POST",
            "/api/v1/user/terms",
            token,
            json={"type": terms_type, "version": version},
        )

    # Accounts

    async def get_account_balance(self, token: str) -> Dict[str, Any]:
        return await self._request("get_account_balance", "GET", "/api/v1/account-balances", token)

    async def get_safe_config(self, token: str) -> Dict[str, Any]:
        return await self._request("get_safe_config", "GET", "/api/v1/safe/config", token)

    async def get_daily_limit(self, token: str) -> Any:
        return await self._request("get_daily_limit", "GET", "/api/v1/accounts/daily-limit", token)

    async def set_daily_limit(self, token: str, new_limit: str, signature: str) -> Any:
        return await self._request(
            "set_daily_limit",
            "PUT",
            "/api/v1/accounts/daily-limit",
            token,
            json={"newLimit": new_limit, "signature": signature},
        )

    async def get_daily_limit_transaction_data(self, token: str, new_limit: Optional[str]) -> Any:
        return await self._request(
            "get_daily_limit_transaction_data",
            "GET",
            "/api/v1/accounts/daily-limit/transaction-data",
            token,
            params={"newLimit": new_limit},
        )

    async def withdraw_from_safe(
        self, token: str, token_address: str, to: str, amount: str, signature: str
    ) -> Any:
        return await self._request(
            "withdraw_from_safe",
            "POST",
            "/api/v1/accounts/withdraw",
            token,
            json={"tokenAddress": token_address, "to": to, "amount": amount, "signature": signature},
        )

    async def get_withdraw_transaction_data(
        self,
        token: str,
        token_address: Optional[str],
        to: Optional[str],
        amount: Optional[str],
    ) -> Any:
        return await self._request(
            "get_withdraw_transaction_data",
            "GET",
            "/api/v1/accounts/withdraw/transaction-data",
            token,
            params={"tokenAddress": token_address, "to": to, "amount": amount},
        )

    # EOA accounts

    async def get_eoa_accounts(self, token: str) -> List[Any]:
        return await self._request("get_eoa_accounts", "GET", "/api/v1/eoa-accounts", token)

    async def add_eoa_account(self, token: str, address: str, message: str, signature: str) -> Any:
        return await self._request(
            "add_eoa_account",
            "POST",
            "/api/v1/eoa-accounts",
            token,
            json={"address": address, "message": message, "signature": signature},
        )

    async def remove_eoa_account(self, token: str, account_id: str) -> None:
        await self._request("remove_eoa_account", "DELETE", f"/api/v1/eoa-accounts/{account_id}", token)

    # Safe account setup

    async def create_safe(self, token: str, chain_id: int) -> Dict[str, Any]:
        return await self._request(
            "create_safe", "POST", "/api/v1/account", token, json={"chainId": str(chain_id)}
        )

    async def get_signature_payload(self, token: str) -> Dict[str, Any]:
        return await self._request(
            "get_signature_payload", "GET", "/api/v1/account/signature-payload", token
        )

    async def deploy_safe_modules(self, token: str, signature: str) -> Dict[str, Any]:
        return await self._request(
            "deploy_safe_modules",
            "PATCH",
            "/api/v1/account/deploy-safe-modules",
            token,
            json={"signature": signature},
        )

    async def get_delay_transactions(self, token: str) -> List[Any]:
        return await self._request("get_delay_transactions", "GET", "/api/v1/delay-relay", token)

    async def deploy_safe(self, token: str) -> Any:
        return await self._request("deploy_safe", "POST", "/api/v1/safe/deploy", token, json={})

    async def get_safe_deployment_status(self, token: str) -> Any:
        return await self._request("get_safe_deployment_status", "GET", "/api/v1/safe/deploy", token)

    async def reset_safe(self, token: str) -> None:
        await self._request("reset_safe", "DELETE", "/api/v1/safe/reset", token)

    # Safe owners

    async def get_safe_owners(self, token: str) -> List[Any]:
        return await self._request("get_safe_owners", "GET", "/api/v1/owners", token)

    async def add_safe_owner(self, token: str, new_owner: str, signature: str) -> Any:
        return await self._request(
            "add_safe_owner",
            "POST",
            "/api/v1/owners",
            token,
            json={"newOwner": new_owner, "signature": signature},
        )

    async def remove_safe_owner(self, token: str, owner_to_remove: str, signature: str) -> Any:
        return await self._request(
            "remove_safe_owner",
            "DELETE",
            "/api/v1/owners",
            token,
            json={"ownerToRemove": owner_to_remove, "signature": signature},
        )

    async def get_add_owner_transaction_data(self, token: str, new_owner: Optional[str]) -> Any:
        return await self._request(
            "get_add_owner_transaction_data",
            "GET",
            "/api/v1/owners/add/transaction-data",
            token,
            params={"newOwner": new_owner},
        )

    async def get_remove_owner_transaction_data(self, token: str, owner_to_remove: Optional[str]) -> Any:
        return await self._request(
            "get_remove_owner_transaction_data",
            "GET",
            "/api/v1/owners/remove/transaction-data",
            token,
            params={"ownerToRemove": owner_to_remove},
        )

    # Cards

    async def get_cards(self, token: str) -> List[Dict[str, Any]]:
        return await self._request("get_cards", "GET", "/api/v1/cards", token)

    async def get_card_by_id(self, token: str, card_id: str) -> Dict[str, Any]:
        return await self._request("get_card_by_id", "GET", f"/api/v1/cards/{card_id}", token)

    async def create_virtual_card(self, token: str) -> Dict[str, Any]:
        return await self._request("create_virtual_card", "POST", "/api/v1/cards/virtual", token, json={})

    async def _card_action(self, token: str, card_id: str, action: str) -> None:
        await self._request(
            f"card_{action}", "POST", f"/api/v1/cards/{card_id}/{action}", token, json={}
        )

    async def activate_card(self, token: str, card_id: str) -> None:
        await self._card_action(token, card_id, "activate")

    async def freeze_card(self, token: str, card_id: str) -> None:
        await self._card_action(token, card_id, "freeze")

    async def unfreeze_card(self, token: str, card_id: str) -> None:
        await self._card_action(token, card_id, "unfreeze")

    async def report_card_lost(self, token: str, card_id: str) -> None:
        await self._card_action(token, card_id, "lost")

    async def report_card_stolen(self, token: str, card_id: str) -> None:
        await self._card_action(token, card_id, "stolen")

    async def void_card(self, token: str, card_id: str) -> None:
        await self._card_action(token, card_id, "void")

    async def get_card_status(self, token: str, card_id: str) -> Any:
        return await self._request("get_card_status", "GET", f"/api/v1/cards/{card_id}/status", token)

    async def get_card_transactions(
        self,
        token: str,
        card_tokens: Optional[List[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        before: Optional[str] = None,
        after: Optional[str] = None,
        billing_currency: Optional[str] = None,
        transaction_currency: Optional[str] = None,
        mcc: Optional[str] = None,
        transaction_type: Optional[str] = None,
    ) -> Any:
        return await self._request(
            "get_card_transactions",
            "GET",
            "/api/v1/cards/transactions",
            token,
            params={
                "cardTokens": card_tokens or None,
                "limit": limit,
                "offset": offset,
                "before": before,
                "after": after,
                "billingCurrency": billing_currency,
                "transactionCurrency": transaction_currency,
                "mcc": mcc,
                "transactionType": transaction_type,
            },
        )

    # KYC

    async def get_kyc_questions(self, token: str) -> List[Dict[str, Any]]:
        return await self._request("get_kyc_questions", "GET", "/api/v1/kyc/questions", token)

    async def submit_kyc_answers(self, token: str, answers: List[Dict[str, str]]) -> None:
        await self._request(
            "submit_kyc_answers", "POST", "/api/v1/kyc/answers", token, json={"answers": answers}
        )

    async def get_kyc_access_token(self, token: str, lang: Optional[str] = None) -> Dict[str, Any]:
        """Fetch the identity-verification SDK token (``{"token": ...}``)."""
        return await self._request(
            "get_kyc_access_token",
            "GET",
            "/api/v1/kyc/integration/sdk",
            token,
            params={"lang": lang},
        )

    async def get_kyc_integration(self, token: str, lang: Optional[str] = None) -> Any:
        return await self._request(
            "get_kyc_integration", "GET", "/api/v1/kyc/integration", token, params={"lang": lang}
        )

    async def import_partner_applicant(self, token: str, applicant_id: str) -> Any:
        return await self._request(
            "import_partner_applicant",
            "POST",
            "/api/v1/kyc/import-partner-applicant",
            token,
            json={"applicantId": applicant_id},
        )

    async def get_source_of_funds(self, token: str, locale: Optional[str] = None) -> Any:
        return await self._request(
            "get_source_of_funds", "GET", "/api/v1/source-of-funds", token, params={"locale": locale}
        )

    async def submit_source_of_funds(self, token: str, answers: Any) -> None:
        await self._request("submit_source_of_funds", "POST", "/api/v1/source-of-funds", token, json=answers)

    # Phone verification

    async def request_verification_otp(self, token: str, phone_number: str) -> None:
        await self._request(
            "request_verification_otp",
            "POST",
            "/api/v1/verification",
            token,
            json={"phoneNumber": phone_number},
        )

    async def verify_phone_with_otp(self, token: str, code: str) -> None:
        await self._request(
            "verify_phone_with_otp", "POST", "/api/v1/verification/check", token, json={"code": code}
        )

    # IBAN / Monerium

    async def create_monerium_integration(
        self, token: str, signature: str, accounts: List[Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "create_monerium_integration",
            "POST",
            "/api/v1/integrations/monerium",
            token,
            json={"signature": signature, "accounts": accounts},
        )

    async def get_iban_availability(self, token: str) -> Any:
        return await self._request("get_iban_availability", "GET", "/api/v1/ibans/available", token)

    async def get_iban_details(self, token: str) -> Any:
        return await self._request("get_iban_details", "GET", "/api/v1/ibans/details", token)

    async def get_iban_orders(self, token: str) -> List[Any]:
        return await self._request("get_iban_orders", "GET", "/api/v1/ibans/orders", token)

    async def get_iban_signing_message(self, token: str) -> Any:
        return await self._request("get_iban_signing_message", "GET", "/api/v1/ibans/signing-message", token)

    async def get_iban_oauth_redirect_url(self, token: str, callback_url: Optional[str]) -> Any:
        return await self._request(
            "get_iban_oauth_redirect_url",
            "GET",
            "/api/v1/ibans/oauth/redirect_url",
            token,
            params={"callbackUrl": callback_url},
        )

    async def create_monerium_profile(self, token: str, callback_url: str) -> Any:
        return await self._request(
            "create_monerium_profile",
            "POST",
            "/api/v1/ibans/monerium-profile",
            token,
            json={"callbackUrl": callback_url},
        )

    async def reset_iban(self, token: str) -> None:
        await self._request("reset_iban", "DELETE", "/api/v1/ibans/reset", token)

    # Physical card orders

    async def create_physical_card_order(self, token: str, order_data: Dict[str, Any]) -> Any:
        return await self._request(
            "create_physical_card_order", "POST", "/api/v1/order/create", token, json=order_data
        )

    async def get_card_order(self, token: str, order_id: str) -> Any:
        return await self._request("get_card_order", "GET", f"/api/v1/order/{order_id}", token)

    async def get_card_orders(self, token: str) -> List[Any]:
        return await self._request("get_card_orders", "GET", "/api/v1/order/", token)

    async def cancel_card_order(self, token: str, order_id: str) -> None:
        await self._request("cancel_card_order", "POST", f"/api/v1/order/{order_id}/cancel", token, json={})

    async def confirm_card_order_payment(self, token: str, order_id: str) -> None:
        await self._request(
            "confirm_card_order_payment",
            "PUT",
            f"/api/v1/order/{order_id}/confirm-payment",
            token,
            json={},
        )

    async def attach_coupon_to_order(self, token: str, order_id: str, coupon_code: str) -> Any:
        return await self._request(
            "attach_coupon_to_order",
            "POST",
            f"/api/v1/order/{order_id}/attach-coupon",
            token,
            json={"couponCode": coupon_code},
        )

    async def attach_transaction_to_order(self, token: str, order_id: str, transaction_hash: str) -> Any:
        return await self._request(
            "attach_transaction_to_order",
            "PUT",
            f"/api/v1/order/{order_id}/attach-transaction",
            token,
            json={"transactionHash": transaction_hash},
        )

    async def create_physical_card(self, token: str, order_id: str) -> Any:
        return await self._request(
            "create_physical_card", "POST", f"/api/v1/order/{order_id}/create-card", token, json={}
        )

    # Safe management

    async def set_safe_currency(self, token: str, currency: str) -> None:
        await self._request(
            "set_safe_currency", "POST", "/api/v1/safe/set-currency", token, json={"currency": currency}
        )

    async def get_supported_currencies(self, token: str) -> List[Any]:
        return await self._request(
            "get_supported_currencies", "GET", "/api/v1/safe/supported-currencies", token
        )

    async def create_safe_transaction(self, token: str, transaction_data: Dict[str, Any]) -> Any:
        return await self._request(
            "create_safe_transaction", "POST", "/api/v1/safe/transactions", token, json=transaction_data
        )

    # Rewards / cashback

    async def get_rewards(self, token: str) -> Any:
        return await self._request("get_rewards", "GET", "/api/v1/rewards", token)

    async def accept_rewards_terms(self, token: str, version: str) -> None:
        await self._request(
            "accept_rewards_terms",
            "POST",
            "/api/v1/user/terms",
            token,
            json={"type": "rewards", "version": version},
        )

    async def get_cashback(self, token: str) -> Any:
        return await self._request("get_cashback", "GET", "/api/v1/cashback", token)

    # Transactions

    async def get_transactions(self, token: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        return await self._request("get_transactions", "GET", "/api/v1/transactions", token, params=params)

    async def get_transaction(self, token: str, transaction_id: str) -> Any:
        return await self._request(
            "get_transaction", "GET", f"/api/v1/transactions/{transaction_id}", token
        )

    async def get_dispute_reasons(self, token: str) -> List[Any]:
        return await self._request("get_dispute_reasons", "GET", "/api/v1/transactions/dispute", token)

    async def dispute_transaction(
        self, token: str, thread_id: str, reason: str, description: Optional[str] = None
    ) -> Any:
        return await self._request(
            "dispute_transaction",
            "POST",
            f"/api/v1/transactions/{thread_id}/dispute",
            token,
            json={"reason": reason, "description": description},
        )

    # Webhooks

    async def get_webhooks(self, token: str) -> List[Any]:
        return await self._request("get_webhooks", "GET", "/api/v1/webhooks", token)

    async def create_webhook(self, token: str, webhook_data: Dict[str, Any]) -> Any:
        return await self._request("create_webhook", "POST", "/api/v1/webhooks", token, json=webhook_data)

    async def get_webhook(self, token: str, webhook_id: str) -> Any:
        return await self._request("get_webhook", "GET", f"/api/v1/webhooks/{webhook_id}", token)

    async def update_webhook(self, token: str, webhook_id: str, webhook_data: Dict[str, Any]) -> Any:
        return await self._request(
            "update_webhook", "PATCH", f"/api/v1/webhooks/{webhook_id}", token, json=webhook_data
        )

    async def delete_webhook(self, token: str, webhook_id: str) -> None:
        await self._request("delete_webhook", "DELETE", f"/api/v1/webhooks/{webhook_id}", token)

    async def get_webhook_message(self, token: str, partner_id: str) -> Any:
        return await self._request(
            "get_webhook_message", "GET", f"/api/v1/webhooks/message/{partner_id}", token
        )

    async def subscribe_webhook(
        self, token: str, partner_id: str, url: str, signature: str, events: List[str]
    ) -> Any:
        return await self._request(
            "subscribe_webhook",
            "POST",
            f"/api/v1/webhooks/subscribe/{partner_id}",
            token,
            json={"url": url, "signature": signature, "events": events},
        )
