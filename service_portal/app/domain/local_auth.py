"""
Local accounts: registration, login and user management.

Passwords are hashed with passlib and sessions are HS256 JWTs signed with
``JWT_SECRET``. These tokens are unrelated to the card platform bearer token.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

import asyncpg
import jwt
from fastapi import Request
from passlib.context import CryptContext

from shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from shared.logging import get_logger, set_user_context

from ..adapters.user_store import UserStore

JWT_ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """The user fields returned by auth routes."""
    return {
        "id": user["id"],
        "email": user["email"],
        "name": user.get("name"),
        "role": user.get("role", Role.USER.value),
    }


class LocalAuthService:
    """Register, login and manage locally stored users."""

    def __init__(self, store: UserStore, jwt_secret: str, expires_in_seconds: int = 86400):
        self.store = store
        self.jwt_secret = jwt_secret
        self.expires_in_seconds = expires_in_seconds
        self.logger = get_logger("portal.local_auth")

    def create_access_token(self, user: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user["id"],
            "email": user["email"],
            "role": user.get("role", Role.USER.value),
            "iat": now,
            "exp": now + timedelta(seconds=self.expires_in_seconds),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=JWT_ALGORITHM)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

    def _auth_response(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return {"accessToken": self.create_access_token(user), "user": public_user(user)}

    async def register(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        role: Role = Role.USER,
    ) -> Dict[str, Any]:
        if await self.store.get_by_email(email):
            raise ConflictError("User with this email already exists")

        try:
            user = await self.store.create_user(email, hash_password(password), name, Role(role).value)
        except asyncpg.UniqueViolationError:
            raise ConflictError("User with this email already exists")

        self.logger.info("User registered", user_id=user["id"], role=user["role"])
        return self._auth_response(user)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        user = await self.store.get_by_email(email)
        if not user or not verify_password(password, user["password_hash"]):
            self.logger.warning("Login failed", email=email)
            raise AuthenticationError("Invalid credentials")

        self.logger.info("User logged in", user_id=user["id"])
        return self._auth_response(user)

    async def authenticate(self, token: str) -> Dict[str, Any]:
        """Resolve a local access token to the stored user."""
        claims = self.decode_access_token(token)
        user = await self.store.get_by_id(claims.get("sub"))
        if not user:
            raise AuthenticationError("Unauthorized")
        return user

    # User management

    async def list_users(self) -> List[Dict[str, Any]]:
        return await self.store.list_users()

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        user = await self.store.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    async def update_user(
        self,
        user_id: str,
        changes: Dict[str, Any],
        current_user: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Admins may update anyone; other users only themselves."""
        if current_user.get("role") != Role.ADMIN.value and current_user.get("id") != user_id:
            raise AuthorizationError("You can only update your own profile")

        await self.get_user(user_id)

        fields = {key: value for key, value in changes.items() if value is not None}
        if "email" in fields:
            existing = await self.store.get_by_email(fields["email"])
            if existing and existing["id"] != user_id:
                raise ConflictError("User with this email already exists")
        if "password" in fields:
            fields["password_hash"] = hash_password(fields.pop("password"))

        try:
            user = await self.store.update_user(user_id, fields)
        except asyncpg.UniqueViolationError:
            raise ConflictError("User with this email already exists")

        self.logger.info("User updated", user_id=user_id, fields=sorted(fields))
        return user

    async def delete_user(self, user_id: str) -> None:
        if not await self.store.delete_user(user_id):
            raise NotFoundError(f"User with ID {user_id} not found")
        self.logger.info("User deleted", user_id=user_id)

    async def change_role(self, user_id: str, role: Role) -> Dict[str, Any]:
        await self.get_user(user_id)
        user = await self.store.update_user(user_id, {"role": Role(role).value})
        self.logger.info("User role changed", user_id=user_id, role=user["role"])
        return user


class LocalUserGuard:
    """FastAPI dependency resolving the local JWT to the current user."""

    def __init__(self, auth_service: LocalAuthService):
        self.auth_service = auth_service

    async def __call__(self, request: Request) -> Dict[str, Any]:
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            raise AuthenticationError("Unauthorized")

        user = await self.auth_service.authenticate(auth_header[7:])
        set_user_context(user["id"])
        request.state.user = user
        return user


class AdminGuard:
    """Dependency requiring the current local user to be an admin."""

    def __init__(self, user_guard: LocalUserGuard):
        self.user_guard = user_guard

    async def __call__(self, request: Request) -> Dict[str, Any]:
        user = await self.user_guard(request)
        if user.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Forbidden resource")
        return user
