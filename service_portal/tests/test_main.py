"""
Unit tests for the Portal service routes.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from service_portal.app.domain.auth_guard import GnosisPayAuthGuard
from service_portal.app.main import PortalService, create_app
from shared.errors import AuthenticationError

BASE_URL = "https://api.gnosispay.com"
AUTH = {"Authorization": "Bearer upstream-token"}


def upstream_response(status_code, body=None, text=None, method="GET", path="/"):
    content = text if text is not None else (json.dumps(body) if body is not None else b"")
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request(method, f"{BASE_URL}{path}"),
    )


class TestPortalRoutes:
    """Test cases for the Portal service routes."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app())

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "portal"
        assert data["status"] == "ok"
        assert data["dependencies"]["database"] == "idle"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_nonce_is_plain_text(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.request = AsyncMock(
                return_value=upstream_response(200, text="a1b2c3d4")
            )

            response = client.get("/api/v1/auth/nonce")

            assert response.status_code == 200
            assert response.text == "a1b2c3d4"
            assert response.headers["content-type"].startswith("text/plain")

    def test_challenge_returns_token(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            request = AsyncMock(return_value=upstream_response(200, {"token": "jwt-from-upstream"}, method="POST"))
            mock_client.return_value.__aenter__.return_value.request = request

            response = client.post(
                "/api/v1/auth/challenge",
                json={"message": "siwe message", "signature": "0xsig", "ttlInSeconds": 3600},
            )

            assert response.status_code == 200
            assert response.json() == {"token": "jwt-from-upstream"}
            assert request.call_args.kwargs["json"] == {
                "message": "siwe message",
                "signature": "0xsig",
                "ttlInSeconds": 3600,
            }

    def test_challenge_validation_failure(self, client):
        response = client.post(
            "/api/v1/auth/challenge",
            json={"message": "siwe message", "signature": "0xsig", "ttlInSeconds": 10},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["statusCode"] == 400
        assert data["message"] == "Validation failed"
        assert data["path"] == "/api/v1/auth/challenge"
        assert data["method"] == "POST"
        assert data["error"][0]["field"] == "ttlInSeconds"

    def test_missing_authorization_header(self, client):
        response = client.get("/api/v1/user")

        assert response.status_code == 401
        assert response.json()["message"] == "Authorization header is required"

    def test_wrong_authorization_scheme(self, client):
        response = client.get("/api/v1/cards", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authorization header format. Expected: Bearer <token>"

    def test_upstream_not_found_is_passed_through(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            request = AsyncMock(return_value=upstream_response(404, {"error": "Card not found"}))
            mock_client.return_value.__aenter__.return_value.request = request

            response = client.get("/api/v1/cards/card-1/status", headers=AUTH)

            assert response.status_code == 404
            data = response.json()
            assert data["message"] == "Card not found"
            assert data["path"] == "/api/v1/cards/card-1/status"
            assert request.call_args.kwargs["headers"] == {"Authorization": "Bearer upstream-token"}

    def test_card_transactions_split_card_tokens(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            request = AsyncMock(return_value=upstream_response(200, []))
            mock_client.return_value.__aenter__.return_value.request = request

            response = client.get(
                "/api/v1/cards/transactions",
                params={"cardTokens": "card-1, card-2", "limit": 5},
                headers=AUTH,
            )

            assert response.status_code == 200
            assert request.call_args.args == ("GET", "/api/v1/cards/transactions")
            assert request.call_args.kwargs["params"] == {"cardTokens": ["card-1", "card-2"], "limit": 5}

    def test_transactions_default_pagination(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            request = AsyncMock(return_value=upstream_response(200, []))
            mock_client.return_value.__aenter__.return_value.request = request

            response = client.get("/api/v1/transactions", headers=AUTH)

            assert response.status_code == 200
            assert request.call_args.kwargs["params"] == {"page": 1, "limit": 20}

    def test_transactions_limit_bounds(self, client):
        response = client.get("/api/v1/transactions", params={"limit": 500}, headers=AUTH)
        assert response.status_code == 400

    def test_rewards_terms_must_be_accepted(self, client):
        response = client.post(
            "/api/v1/rewards/accept-terms",
            json={"version": "1.0", "accepted": False},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Terms must be accepted"

    def test_kyc_flow_status(self, client):
        user = {"kycStatus": "pending", "isSourceOfFundsAnswered": False, "isPhoneValidated": True}
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.request = AsyncMock(
                side_effect=[
                    upstream_response(200, user),
                    upstream_response(403, {"error": "Forbidden"}),
                ]
            )

            response = client.get("/api/v1/kyc/flow-status", headers=AUTH)

            assert response.status_code == 200
            assert response.json() == {
                "kycStatus": "pending",
                "isSourceOfFundsAnswered": False,
                "isPhoneValidated": True,
                "hasAccessToken": False,
            }


    def test_challenge_without_token_in_upstream_body(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.request = AsyncMock(
                return_value=upstream_response(200, {}, method="POST")
            )

            response = client.post(
                "/api/v1/auth/challenge",
                json={"message": "siwe message", "signature": "0xsig"},
            )

            assert response.status_code == 200
            assert response.json() == {"token": None}

    def test_signup_otp_is_public(self, client):
        with patch("httpx.AsyncClient") as mock_client:
            request = AsyncMock(return_value=upstream_response(200, method="POST"))
            mock_client.return_value.__aenter__.return_value.request = request

            response = client.post("/api/v1/auth/signup/otp", json={"email": "user@example.com"})

            assert response.status_code == 200
            assert request.call_args.args == ("POST", "/api/v1/auth/signup/otp")
            assert request.call_args.kwargs["json"] == {"email": "user@example.com"}
            assert request.call_args.kwargs["headers"] is None

    @pytest.mark.parametrize(
        "method, path, params, body, upstream_method, upstream_path",
        [
            ("GET", "/api/v1/accounts/onchain-daily-limit", None, None,
             "GET", "/api/v1/accounts/daily-limit"),
            ("PUT", "/api/v1/accounts/onchain-daily-limit", None, {"newLimit": "250", "signature": "0xsig"},
             "PUT", "/api/v1/accounts/daily-limit"),
            ("GET", "/api/v1/accounts/onchain-daily-limit/transaction-data", {"newLimit": "250"}, None,
             "GET", "/api/v1/accounts/daily-limit/transaction-data"),
        ],
    )
    def test_deprecated_daily_limit_aliases(self, client, method, path, params, body, upstream_method, upstream_path):
        with patch("httpx.AsyncClient") as mock_client:
            request = AsyncMock(return_value=upstream_response(200, {"dailyLimit": "250"}))
            mock_client.return_value.__aenter__.return_value.request = request

            response = client.request(method, path, params=params, json=body, headers=AUTH)

            assert response.status_code == 200
            assert request.call_args.args == (upstream_method, upstream_path)
            assert request.call_args.kwargs["headers"] == {"Authorization": "Bearer upstream-token"}
            if body is not None:
                assert request.call_args.kwargs["json"] == body
            if params is not None:
                assert request.call_args.kwargs["params"] == params

    def test_confirm_card_order_requires_confirmation(self, client):
        response = client.post("/api/v1/card-orders/order-1/confirm", json={}, headers=AUTH)

        assert response.status_code == 400
        assert response.json()["error"][0]["field"] == "confirmation"

    def test_reference_enums_are_documented(self, client):
        schema = client.get("/openapi.json").json()

        assert "resubmissionRequested" in schema["paths"]["/api/v1/kyc/status"]["get"]["description"]
        assert "CARDCREATED" in schema["paths"]["/api/v1/card-orders"]["get"]["description"]
        description = schema["paths"]["/api/v1/transactions"]["get"]["description"]
        assert "Refund" in description
        assert "InsufficientFunds" in description


class TestNotificationRoutes:
    """Test cases for the SMS and email routes."""

    @pytest.fixture
    def service(self):
        return PortalService()

    @pytest.fixture
    def client(self, service):
        return TestClient(service.app)

    def test_otp_sms(self, client, service):
        with patch.object(service.sms_client, "send", AsyncMock(return_value="SM42")) as mock_send:
            response = client.post(
                "/sms/otp",
                json={"to": "+351912345678", "code": "123456", "purpose": "login", "language": "pt-PT"},
            )

            assert response.status_code == 200
            assert response.json() == {"success": True, "sid": "SM42"}
            assert "123456" in mock_send.call_args.args[1]

    def test_sms_rejects_invalid_phone(self, client):
        response = client.post("/sms/test", json={"to": "not-a-phone", "message": "hi"})
        assert response.status_code == 400

    def test_sms_without_credentials(self, client, service):
        service.sms_client.account_sid = None
        service.sms_client.auth_token = None
        service.sms_client._client = None

        response = client.post("/sms/test", json={"to": "+351912345678", "message": "hi"})

        assert response.status_code == 500
        assert response.json()["message"] == "Twilio credentials not configured"

    def test_send_email_unknown_template(self, client):
        response = client.post(
            "/email/send",
            json={"to": "user@example.com", "template": "missing", "params": {}},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Unknown email template: missing"

    def test_send_example_email(self, client, service):
        with patch.object(service.email_client, "send", AsyncMock(return_value="<id@portalfi.com>")):
            response = client.post(
                "/email/send-example",
                json={"to": "user@example.com", "name": "Ana", "language": "es"},
            )

            assert response.status_code == 200
            assert response.json() == {"status": "ok", "messageId": "<id@portalfi.com>"}

    def test_preview_email(self, client):
        response = client.get("/email/preview-example", params={"language": "es"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Daniel" in response.text


class TestGnosisPayAuthGuard:
    """Test cases for the bearer token guard."""

    @staticmethod
    def make_request(authorization):
        headers = [(b"authorization", authorization.encode())] if authorization is not None else []
        return Request({
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/api/v1/user",
            "query_string": b"",
            "headers": headers,
        })

    @pytest.mark.asyncio
    async def test_token_is_returned_verbatim(self):
        request = self.make_request("Bearer abc.def.ghi")

        token = await GnosisPayAuthGuard()(request)

        assert token == "abc.def.ghi"
        assert request.state.gnosispay_token == "abc.def.ghi"

    @pytest.mark.asyncio
    async def test_empty_token(self):
        with pytest.raises(AuthenticationError) as exc_info:
            await GnosisPayAuthGuard()(self.make_request("Bearer "))

        assert exc_info.value.message == "Bearer token is empty"

    @pytest.mark.asyncio
    async def test_scheme_is_case_sensitive(self):
        with pytest.raises(AuthenticationError) as exc_info:
            await GnosisPayAuthGuard()(self.make_request("bearer abc"))

        assert exc_info.value.message == "Invalid authorization header format. Expected: Bearer <token>"
