"""
Sign-In With Ethereum flow and signup against the card platform.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from shared.logging import get_logger

from ..adapters.gnosispay_client import GnosisPayClient

SIWE_STATEMENT = "Sign in with Ethereum to GnosisPay"
SIWE_VERSION = "1"
GNOSIS_CHAIN_ID = 100


def build_siwe_message(
    domain: str,
    address: str,
    nonce: str,
    statement: str = SIWE_STATEMENT,
    chain_id: int = GNOSIS_CHAIN_ID,
    issued_at: Optional[datetime] = None,
) -> str:
    """Format an EIP-4361 message."""
    issued_at = issued_at or datetime.now(timezone.utc)
    return (
        f"{domain} wants you to sign in with your Ethereum account:\n"
        f"{address}\n"
        f"\n"
        f"{statement}\n"
        f"\n"
        f"URI: https://{domain}\n"
        f"Version: {SIWE_VERSION}\n"
        f"Chain ID: {chain_id}\n"
        f"Nonce: {nonce}\n"
        f"Issued At: {issued_at.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3]}Z"
    )


class GnosisPayAuthService:
    """Authentication helpers built on the card platform client."""

    def __init__(self, client: GnosisPayClient):
        self.client = client
        self.logger = get_logger("portal.auth_service")

    async def authenticate_with_siwe(self, private_key: str, address: str, domain: str) -> str:
        """Run nonce, sign and challenge with a locally held key; returns the upstream token.

        Intended for automation and tests. Browser clients sign with their own
        wallet and call the challenge route directly.
        """
        nonce = await self.client.generate_nonce()
        message = build_siwe_message(domain, address, str(nonce).strip())

        signed = Account.from_key(private_key).sign_message(encode_defunct(text=message))
        signature = signed.signature.hex()
        if not signature.startswith("0x"):
            signature = f"0x{signature}"

        response = await self.client.verify_challenge(message, signature)
        self.logger.info("SIWE authentication completed", address=address, domain=domain)
        return response["token"]

    async def signup_user(
        self,
        token: str,
        email: str,
        otp: Optional[str] = None,
        referral_code: Optional[str] = None,
        marketing_campaign: Optional[str] = None,
        partner_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.client.signup(token, email, otp, referral_code, marketing_campaign, partner_id)
