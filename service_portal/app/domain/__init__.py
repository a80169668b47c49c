"""
Domain layer for the Portal service.

Includes the card platform services (SIWE auth, cards, KYC), the bearer token
guard, local account management and the activity trail.
"""

from .auth_guard import GnosisPayAuthGuard
from .auth_service import GnosisPayAuthService
from .card_service import GnosisPayCardService
from .kyc_service import GnosisPayKycService
from .local_auth import LocalAuthService

__all__ = [
    "GnosisPayAuthGuard",
    "GnosisPayAuthService",
    "GnosisPayCardService",
    "GnosisPayKycService",
    "LocalAuthService",
]
