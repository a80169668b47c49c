"""
PostgreSQL persistence for local Portal accounts.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import asyncpg

from shared.errors import PortalException
from shared.logging import get_logger


PUBLIC_COLUMNS = "id, email, name, role, created_at, updated_at"


class UserStore:
    """asyncpg-backed store for the ``users`` table.

    The pool is created on first use so the service can boot (and serve the
    card platform routes) without a reachable database.
    """

    def __init__(self, dsn: str):
        self.dsn = dsn
        self.logger = get_logger("portal.user_store")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self) -> asyncpg.Pool:
        """Open the pool and ensure the schema exists."""
        if self.pool is not None:
            return self.pool
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=1,
                max_size=10,
                command_timeout=30
            )
            await self._create_tables()
            self.logger.info("User store started")
            return self.pool
        except (OSError, asyncpg.PostgresError) as e:
            self.pool = None
            self.logger.error("Failed to start user store", error=str(e))
            raise PortalException("User store unavailable", status_code=503) from e

    async def stop(self):
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("User store stopped")

    async def ping(self) -> bool:
        if self.pool is None:
            return False
        async with self.pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        return True

    async def _create_tables(self):
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id VARCHAR(36) PRIMARY KEY,
                    email VARCHAR(320) NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    name VARCHAR(255),
                    role VARCHAR(16) NOT NULL DEFAULT 'USER',
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
                );
            """)

    @staticmethod
    def _row_to_user(row: Optional[asyncpg.Record], include_hash: bool = False) -> Optional[Dict[str, Any]]:
        if row is None:
            return None
        user = dict(row)
        if not include_hash:
            user.pop("password_hash", None)
        return user

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        role: str = "USER",
    ) -> Dict[str, Any]:
        pool = await self.start()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO users (id, email, password_hash, name, role)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {PUBLIC_COLUMNS}
                """,
                str(uuid.uuid4()), email, password_hash, name, role,
            )
        return self._row_to_user(row)

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Fetch a user including the password hash, for credential checks."""
        pool = await self.start()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {PUBLIC_COLUMNS}, password_hash FROM users WHERE email = $1",
                email,
            )
        return self._row_to_user(row, include_hash=True)

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        pool = await self.start()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {PUBLIC_COLUMNS} FROM users WHERE id = $1", user_id)
        return self._row_to_user(row)

    async def list_users(self) -> List[Dict[str, Any]]:
        pool = await self.start()
        async with pool.acquire() as conn:
            rows = await conn.fetch(f"SELECT {PUBLIC_COLUMNS} FROM users ORDER BY created_at")
        return [self._row_to_user(row) for row in rows]

    async def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply column changes; keys must be among email, name, password_hash, role."""
        allowed = {"email", "name", "password_hash", "role"}
        fields = {key: value for key, value in changes.items() if key in allowed}
        if not fields:
            return await self.get_by_id(user_id)

        assignments = ", ".join(f"{column} = ${index}" for index, column in enumerate(fields, start=2))
        updated_at_index = len(fields) + 2
        pool = await self.start()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE users SET {assignments}, updated_at = ${updated_at_index}
                WHERE id = $1
                RETURNING {PUBLIC_COLUMNS}
                """,
                user_id, *fields.values(), datetime.now(timezone.utc),
            )
        return self._row_to_user(row)

    async def delete_user(self, user_id: str) -> bool:
        pool = await self.start()
        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM users WHERE id = $1", user_id)
        return result.endswith(" 1")
