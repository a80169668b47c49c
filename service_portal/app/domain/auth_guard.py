"""
Bearer token guard for card platform routes.
"""

from fastapi import Request

from shared.errors import AuthenticationError
from shared.logging import get_logger


class GnosisPayAuthGuard:
    """FastAPI dependency that checks the Authorization header and yields the raw token.

    The token is opaque to this service: it is neither decoded nor validated,
    only forwarded to the card platform exactly as received.
    """

    def __init__(self):
        self.logger = get_logger("portal.auth_guard")

    async def __call__(self, request: Request) -> str:
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            self.logger.warning("Missing authorization header", path=request.url.path)
            raise AuthenticationError("Authorization header is required")

        if not auth_header.startswith("Bearer "):
            self.logger.warning("Invalid authorization header format", path=request.url.path)
            raise AuthenticationError("Invalid authorization header format. Expected: Bearer <token>")

        token = auth_header[7:]  # Remove "Bearer " prefix
        if not token.strip():
            self.logger.warning("Empty bearer token", path=request.url.path)
            raise AuthenticationError("Bearer token is empty")

        request.state.gnosispay_token = token
        return token
