"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Resolver existencia de usuarios por id.

Collaborators:
  - identity.users.User
  - PostgresRepositoryBase
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....identity.users import User
from .base import PostgresRepositoryBase


class PostgresUserRepository(PostgresRepositoryBase):
    _SQL_GET = "SELECT id, email, created_at FROM users WHERE id = %s"

    def get_user(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=self._SQL_GET,
            params=[user_id],
            context_msg="PostgresUserRepository: Failed to get user",
            extra={"user_id": str(user_id)},
        )
        if not row:
            return None
        user_id, email, created_at = row
        return User(id=user_id, email=email, created_at=created_at)
