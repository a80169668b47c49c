"""
Unit tests for the auth, card and KYC services.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from service_portal.app.domain.auth_service import GnosisPayAuthService, build_siwe_message
from service_portal.app.domain.card_service import GnosisPayCardService
from service_portal.app.domain.kyc_service import GnosisPayKycService
from shared.errors import UpstreamError

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def upstream():
    return MagicMock()


class TestGnosisPayAuthService:
    """Test cases for the SIWE helper."""

    def test_siwe_message_format(self):
        message = build_siwe_message("portalfi.com", "0xAbC", "nonce123")
        lines = message.split("\n")

        assert lines[0] == "portalfi.com wants you to sign in with your Ethereum account:"
        assert lines[1] == "0xAbC"
        assert lines[3] == "Sign in with Ethereum to GnosisPay"
        assert "URI: https://portalfi.com" in lines
        assert "Version: 1" in lines
        assert "Chain ID: 100" in lines
        assert "Nonce: nonce123" in lines
        assert lines[-1].startswith("Issued At: ")

    @pytest.mark.asyncio
    async def test_authenticate_with_siwe_signs_and_returns_token(self, upstream):
        address = Account.from_key(PRIVATE_KEY).address
        upstream.generate_nonce = AsyncMock(return_value="nonce123")
        upstream.verify_challenge = AsyncMock(return_value={"token": "upstream-token"})
        service = GnosisPayAuthService(upstream)

        token = await service.authenticate_with_siwe(PRIVATE_KEY, address, "portalfi.com")

        assert token == "upstream-token"
        message, signature = upstream.verify_challenge.call_args.args
        assert "Nonce: nonce123" in message
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
        assert recovered == address

    @pytest.mark.asyncio
    async def test_signup_forwards_all_fields(self, upstream):
        upstream.signup = AsyncMock(return_value={"id": "u1", "token": "t", "hasSignedUp": True})
        service = GnosisPayAuthService(upstream)

        await service.signup_user("tok", "user@example.com", "123456", "REF", "spring", "partner-1")

        upstream.signup.assert_awaited_once_with(
            "tok", "user@example.com", "123456", "REF", "spring", "partner-1"
        )


class TestGnosisPayCardService:
    """Test cases for the card service."""

    @pytest.mark.asyncio
    async def test_card_transactions_filter_on_card(self, upstream):
        upstream.get_card_transactions = AsyncMock(return_value=[])
        service = GnosisPayCardService(upstream)

        await service.get_card_transactions("tok", "card-1")

        upstream.get_card_transactions.assert_awaited_once_with("tok", card_tokens=["card-1"])


class TestGnosisPayKycService:
    """Test cases for the KYC service."""

    @pytest.fixture
    def user(self):
        return {
            "id": "u1",
            "kycStatus": "approved",
            "isSourceOfFundsAnswered": True,
            "isPhoneValidated": False,
        }

    @pytest.mark.asyncio
    async def test_flow_status_with_access_token(self, upstream, user):
        upstream.get_user = AsyncMock(return_value=user)
        upstream.get_kyc_access_token = AsyncMock(return_value={"token": "sdk"})

        status = await GnosisPayKycService(upstream).get_kyc_flow_status("tok")

        assert status == {
            "kycStatus": "approved",
            "isSourceOfFundsAnswered": True,
            "isPhoneValidated": False,
            "hasAccessToken": True,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [403, 500])
    async def test_flow_status_swallows_token_failure(self, upstream, user, status_code):
        upstream.get_user = AsyncMock(return_value=user)
        upstream.get_kyc_access_token = AsyncMock(side_effect=UpstreamError("nope", status_code))

        status = await GnosisPayKycService(upstream).get_kyc_flow_status("tok")

        assert status["hasAccessToken"] is False
        assert status["kycStatus"] == "approved"

    @pytest.mark.asyncio
    async def test_flow_status_propagates_user_failure(self, upstream):
        upstream.get_user = AsyncMock(side_effect=UpstreamError("invalid token", 401))
        upstream.get_kyc_access_token = AsyncMock()

        with pytest.raises(UpstreamError):
            await GnosisPayKycService(upstream).get_kyc_flow_status("tok")

        upstream.get_kyc_access_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_access_token_returns_token_string(self, upstream):
        upstream.get_kyc_access_token = AsyncMock(return_value={"token": "sdk-token"})

        assert await GnosisPayKycService(upstream).get_kyc_access_token("tok") == "sdk-token"
